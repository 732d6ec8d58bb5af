from typing import Optional, Union

from crossname.refactor.naming import NamingCase, convert_case, detect_case
from .rename_symbol import RenameScope, RenameSymbolOperation, validate_identifier


class RenameCaseOperation(RenameSymbolOperation):
    """
    Renames a symbol to the same words written in another case, for example
    `getUserData` to `get_user_data`.

    A name that is already in the target case is left alone and the result
    reports no changes.
    """

    def __init__(
        self,
        symbol: str,
        case: Union[NamingCase, str],
        scope: Optional[RenameScope] = None,
    ):
        validate_identifier(symbol, "symbol")
        new = convert_case(symbol, case)
        super().__init__(symbol, new, scope)
        self.case = NamingCase(case)
        self.detected_case = detect_case(symbol)

    @property
    def unchanged(self) -> bool:
        return self.old == self.new
