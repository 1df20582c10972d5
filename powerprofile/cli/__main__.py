from powerprofile.cli.main import main

raise SystemExit(main())
