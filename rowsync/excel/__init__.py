from .grid import GridUnavailableError, Sheet, UnresolvedSheetError, Workbook

__all__ = ["GridUnavailableError", "Sheet", "UnresolvedSheetError", "Workbook"]
