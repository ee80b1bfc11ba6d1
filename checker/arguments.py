from dataclasses import dataclass
from typing import Optional


@dataclass
class BisimArguments:
    left: str
    right: str
    out_prefix: str
    strategy: str = 'rescan'
    csv: bool = False
    verbose: bool = False
    log_file: Optional[str] = None

    @property
    def left_dot(self) -> str:
        return f'{self.out_prefix}-left.dot'

    @property
    def right_dot(self) -> str:
        return f'{self.out_prefix}-right.dot'

    @property
    def relation_csv(self) -> str:
        return f'{self.out_prefix}-relation.csv'
