"""Exceptions raised by the CHIP-8 interpreter and its loaders."""


class Chip8Error(Exception):
    """Base class for all interpreter errors."""


class ProgramLoadError(Chip8Error):
    """A program image could not be placed in memory."""


class ProgramNotFoundError(ProgramLoadError, FileNotFoundError):
    """The program file does not exist or cannot be read."""

    def __init__(self, path, reason: str = "does not exist or is unreadable"):
        self.path = str(path)
        super().__init__(f"ROM file {reason}: {self.path}")


class ProgramTooLargeError(ProgramLoadError, ValueError):
    """The program does not fit between the load address and the end of memory."""

    def __init__(self, size: int, limit: int):
        self.size = size
        self.limit = limit
        super().__init__(f"ROM too large: {size} bytes (at most {limit} bytes fit)")


class ProgramAlreadyLoadedError(ProgramLoadError):
    """A machine accepts exactly one program image."""


class UnmappedOpcodeError(Chip8Error):
    """Raised in strict mode when the fetched opcode has no instruction."""

    def __init__(self, opcode: int, address: int):
        self.opcode = opcode
        self.address = address
        super().__init__(f"Unmapped opcode 0x{opcode:04X} at 0x{address:03X}")
