from battle_report.cli import main

raise SystemExit(main())
