"""
Builder pattern.

:class:`ComputerBuilder` hides the steps needed to assemble a
:class:`Computer` and validates the result before handing it out. Steps can
be chained fluently or requested by name through :meth:`ComputerBuilder.build_with`.
"""
from enum import Enum
from typing import Callable, Dict, List

from pydantic import BaseModel, Field

from patternkit.domain.exceptions import BuilderValidationError, PatternUsageError
from patternkit.infrastructure.logging.logger import get_logger

logger = get_logger(__name__)

MIN_MEMORY_MB = 250
MAX_DRIVES = 4


class DisplayType(str, Enum):
    CRT = "crt"
    LCD = "lcd"


class DriveType(str, Enum):
    HARD_DISK = "hard_disk"
    CD = "cd"
    DVD = "dvd"


class CPU(BaseModel):
    name: str = "basic"
    turbo: bool = False


class Motherboard(BaseModel):
    cpu: CPU = Field(default_factory=CPU)
    memory_size: int = 1000


class Drive(BaseModel):
    type: DriveType
    size: int
    writable: bool = False


class Computer(BaseModel):
    """The product."""

    display: DisplayType = DisplayType.CRT
    motherboard: Motherboard = Field(default_factory=Motherboard)
    drives: List[Drive] = Field(default_factory=list)

    @property
    def total_storage(self) -> int:
        return sum(drive.size for drive in self.drives)


class ComputerBuilder:
    """Assembles a :class:`Computer` one step at a time."""

    product_name = "computer"

    def __init__(self):
        self.reset()

    def reset(self) -> "ComputerBuilder":
        self._computer = Computer()
        return self

    # Steps

    def turbo(self, has_turbo_cpu: bool = True) -> "ComputerBuilder":
        self._computer.motherboard.cpu = CPU(name="turbo" if has_turbo_cpu else "basic", turbo=has_turbo_cpu)
        return self

    def display(self, kind: DisplayType) -> "ComputerBuilder":
        self._computer.display = DisplayType(kind)
        return self

    def memory_size(self, size_in_mb: int) -> "ComputerBuilder":
        self._computer.motherboard.memory_size = size_in_mb
        return self

    def add_cd(self, writer: bool = False) -> "ComputerBuilder":
        return self._add_drive(Drive(type=DriveType.CD, size=760, writable=writer))

    def add_dvd(self, writer: bool = False) -> "ComputerBuilder":
        return self._add_drive(Drive(type=DriveType.DVD, size=4000, writable=writer))

    def add_hard_disk(self, size_in_mb: int) -> "ComputerBuilder":
        return self._add_drive(Drive(type=DriveType.HARD_DISK, size=size_in_mb, writable=True))

    def _add_drive(self, drive: Drive) -> "ComputerBuilder":
        self._computer.drives.append(drive)
        return self

    # Named steps

    def _named_steps(self) -> Dict[str, Callable[[], "ComputerBuilder"]]:
        return {
            "turbo": self.turbo,
            "cd": self.add_cd,
            "cd_writer": lambda: self.add_cd(writer=True),
            "dvd": self.add_dvd,
            "dvd_writer": lambda: self.add_dvd(writer=True),
            "harddisk": lambda: self.add_hard_disk(100000),
            "lcd": lambda: self.display(DisplayType.LCD),
            "crt": lambda: self.display(DisplayType.CRT),
        }

    def build_with(self, *steps: str) -> "ComputerBuilder":
        """
        Apply steps by name, e.g. ``build_with("cd", "dvd", "harddisk")``.

        Raises:
            PatternUsageError: If a step name is unknown
        """
        available = self._named_steps()
        unknown = [step for step in steps if step not in available]
        if unknown:
            raise PatternUsageError(
                f"Unknown builder step(s): {', '.join(unknown)}; "
                f"expected one of {', '.join(sorted(available))}"
            )
        for step in steps:
            available[step]()
        return self

    # Product

    def validate(self) -> List[str]:
        """Return the reasons the current product is invalid."""
        problems = []
        computer = self._computer
        if computer.motherboard.memory_size < MIN_MEMORY_MB:
            problems.append(
                f"not enough memory ({computer.motherboard.memory_size} MB, minimum {MIN_MEMORY_MB} MB)"
            )
        if len(computer.drives) > self.max_drives():
            problems.append(f"too many drives ({len(computer.drives)}, maximum {self.max_drives()})")
        if not any(drive.type is DriveType.HARD_DISK for drive in computer.drives):
            problems.append("no hard disk")
        return problems

    def max_drives(self) -> int:
        return MAX_DRIVES

    def computer(self) -> Computer:
        """
        Validate and return a copy of the product.

        Raises:
            BuilderValidationError: Listing every problem found
        """
        problems = self.validate()
        if problems:
            raise BuilderValidationError(self.product_name, problems)
        logger.debug("Built product", product=self.product_name, drives=len(self._computer.drives))
        return self._computer.model_copy(deep=True)

    build = computer


class LaptopBuilder(ComputerBuilder):
    """Builder for laptops: always LCD, one drive bay plus a hard disk."""

    product_name = "laptop"

    def reset(self) -> "LaptopBuilder":
        super().reset()
        self._computer.display = DisplayType.LCD
        return self

    def display(self, kind: DisplayType) -> "LaptopBuilder":
        if DisplayType(kind) is not DisplayType.LCD:
            raise PatternUsageError("Laptops only have LCD displays")
        return self

    def max_drives(self) -> int:
        return 2
