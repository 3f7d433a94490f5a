"""
Run the training course CLI as a module:

    python -m hrtraining list
    python -m hrtraining --data-dir ./data stats
"""

from hrtraining.cli import main

if __name__ == "__main__":
    main()
