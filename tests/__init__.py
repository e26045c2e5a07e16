from pathlib import Path
import sys

# Modules live at the repository root; make them importable without installation
sys.path.insert(0, str(Path(__file__).resolve().parents[1]))
