from .schnorr import main

raise SystemExit(main())
