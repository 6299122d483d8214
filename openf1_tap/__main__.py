from openf1_tap.cli import main

raise SystemExit(main())
