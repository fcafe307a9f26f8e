from code_lang_check.cli import main

raise SystemExit(main())
