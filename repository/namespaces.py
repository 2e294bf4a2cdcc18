# repository/namespaces.py
from typing import Final

ROOT: Final[str] = "hazardrag"

REPORTS: Final[str] = f"{ROOT}:reports"  # batch analysis reports by reportId
