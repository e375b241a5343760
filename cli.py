#!/usr/bin/env python3
from promo.orchestrator import main


if __name__ == "__main__":
    main()
