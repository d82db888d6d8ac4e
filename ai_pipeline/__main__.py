from ai_pipeline.cli import main

raise SystemExit(main())
