import click
from eth_utils import to_checksum_address
from hexbytes import HexBytes

from governance.proposal import WeightedAddress


class MinInt(click.ParamType):
    name = "minint"

    def __init__(self, min_value):
        self.min_value = min_value

    def convert(self, value, param, ctx):
        try:
            ivalue = int(value)
        except ValueError:
            self.fail(f"{value} is not a valid integer", param, ctx)
        if ivalue < self.min_value:
            self.fail(
                f"{value} is less than the minimum allowed value of {self.min_value}", param, ctx
            )
        return ivalue


class Bytes32(click.ParamType):
    name = "bytes32"

    def convert(self, value, param, ctx):
        try:
            value = HexBytes(value)
        except ValueError:
            self.fail(f"{value} is not a hex string", param, ctx)
        if len(value) != 32:
            self.fail(f"{value} is not 32 bytes long", param, ctx)
        return value


class WeightedAddressType(click.ParamType):
    """Parses 'address:weight' pairs."""

    name = "weighted_address"

    def convert(self, value, param, ctx):
        if isinstance(value, WeightedAddress):
            return value
        address, separator, weight = str(value).partition(":")
        if not separator:
            self.fail(f"{value} is not an 'address:weight' pair", param, ctx)
        try:
            address = to_checksum_address(address)
        except ValueError:
            self.fail(f"Invalid ethereum address: {address}", param, ctx)
        try:
            weight = int(weight)
        except ValueError:
            self.fail(f"{weight} is not a valid integer weight", param, ctx)
        return WeightedAddress(addr=address, weight=weight)
