"""Tree option flags and linking strategies.

Option bit values are fixed (1, 16, 256, 4096) so that stored option
integers stay meaningful.
"""

from enum import Enum, IntFlag


class TreeOption(IntFlag):
    """Combinable tree build options (bitset semantics)."""
    NONE = 0
    COUNT_CHILDREN = 1          # 0000 0000 0000 0001  accepted only; children are always counted
    COUNT_DESCENDANTS = 16      # 0000 0000 0001 0000
    NUMBER_NODES = 256          # 0000 0001 0000 0000
    DEBUG_MODE = 4096           # 0001 0000 0000 0000

    @classmethod
    def parse(cls, value) -> "TreeOption":
        """Convert an int, a flag name, or an iterable of names/flags to a TreeOption.

        Args:
            value: TreeOption, int, str such as "NUMBER_NODES", or an iterable of those

        Returns:
            Combined TreeOption

        Raises:
            ValueError: If a flag name is unknown
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, int):
            return cls(value)
        if isinstance(value, str):
            name = value.strip().upper()
            if name not in cls.__members__:
                raise ValueError(
                    f"Unknown tree option: {value}. "
                    f"Choose from: {', '.join(cls.__members__.keys())}"
                )
            return cls[name]

        combined = cls.NONE
        for item in value:
            combined |= cls.parse(item)
        return combined


class LinkingStrategy(Enum):
    """How the pre-order relation is produced relative to iteration."""
    TWO_PASS = "two_pass"   # linearize fully, then iterate the 'next' chain
    FUSED = "fused"         # linearize while the consumer iterates
