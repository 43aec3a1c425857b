from attachment_transfer.cli import main

raise SystemExit(main())
