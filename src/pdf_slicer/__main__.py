from pdf_slicer.cli import main

raise SystemExit(main())
