from kout.cli import main

raise SystemExit(main())
