"""Block model for produced-block records."""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from ...utils.date_utils import parse_block_datetime


def _as_int(value: Any, default: int = 0) -> int:
    if value is None or value == '':
        return default
    return int(value)


@dataclass(frozen=True)
class Block:
    """
    A block produced by the pool, as reported by the archive.

    Field names follow the archive's column aliases. Monetary fields are in
    nanomina. A ``coinbase`` of ``None`` or 0 marks a block that carries no
    reward (it is still counted as processed).
    """
    blockheight: int
    statehash: str
    stakingledgerhash: str
    blockdatetime: Optional[int] = None
    globalslotsincegenesis: int = 0
    slot: int = 0
    coinbase: Optional[int] = None
    feetransfertoreceiver: int = 0
    feetransferfromcoinbase: int = 0
    usercommandtransactionfees: int = 0
    creatorpublickey: str = ""
    winnerpublickey: str = ""
    receiverpublickey: str = ""

    @property
    def has_coinbase(self) -> bool:
        """True when the block carries a block-production reward."""
        return bool(self.coinbase)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Block':
        """
        Create Block from an archive row.

        Raises:
            KeyError: If blockheight, statehash or stakingledgerhash is missing
        """
        coinbase = data.get('coinbase')
        return cls(
            blockheight=int(data['blockheight']),
            statehash=data['statehash'],
            stakingledgerhash=data['stakingledgerhash'],
            blockdatetime=parse_block_datetime(data.get('blockdatetime')),
            globalslotsincegenesis=_as_int(data.get('globalslotsincegenesis')),
            slot=_as_int(data.get('slot')),
            coinbase=None if coinbase is None else int(coinbase),
            feetransfertoreceiver=_as_int(data.get('feetransfertoreceiver')),
            feetransferfromcoinbase=_as_int(data.get('feetransferfromcoinbase')),
            usercommandtransactionfees=_as_int(data.get('usercommandtransactionfees')),
            creatorpublickey=data.get('creatorpublickey') or "",
            winnerpublickey=data.get('winnerpublickey') or "",
            receiverpublickey=data.get('receiverpublickey') or "",
        )
