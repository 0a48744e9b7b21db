from click import ParamType, Context, Parameter
from typing import Any
import sys

from .types import Passphrase



class PassphraseParamType(ParamType):
    name = "passphrase"

    def convert(self, value: Any, param: Parameter | None, ctx: Context | None) -> Passphrase:
        try:
            assert isinstance(value, str), f"Expected a string value, got {type(value).__name__}"
            assert value != "", "The passphrase must not be empty"
            return value
        except Exception as e:
            self.fail(
                f"{e}",
                param,
                ctx,
            )


PASSPHRASE = PassphraseParamType()



def from_stdin(ctx: Context, param: Parameter, value: Any) -> Any:
    # Read from stdin if value is "-"
    if value == "-":
        return sys.stdin.read()
    return value
