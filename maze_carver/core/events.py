import struct
from typing import Iterator, List, Tuple

# Event Types
EVT_WALL_OPENED = 0x01
EVT_OVERLAY_SET = 0x02
EVT_OVERLAY_CLEARED = 0x03

MAGIC = b"MAZELOG"


class EventSink:
    """
    Receives change notifications from a Grid after it applied them.
    Subclasses override the hooks they care about.
    """
    def write_header(self, rows: int, columns: int):
        pass

    def log_wall_opened(self, fx: int, fy: int):
        pass

    def log_overlay_set(self, fx: int, fy: int, glyph: str):
        pass

    def log_overlay_cleared(self, fx: int, fy: int):
        pass


class EventLog(EventSink):
    """In-memory sink. Events use the same (type_code, data) shape EventReader yields."""
    def __init__(self):
        self.rows = 0
        self.columns = 0
        self.events: List[Tuple[int, Tuple]] = []

    def write_header(self, rows: int, columns: int):
        self.rows, self.columns = rows, columns

    def log_wall_opened(self, fx: int, fy: int):
        self.events.append((EVT_WALL_OPENED, (fx, fy)))

    def log_overlay_set(self, fx: int, fy: int, glyph: str):
        self.events.append((EVT_OVERLAY_SET, (fx, fy, glyph)))

    def log_overlay_cleared(self, fx: int, fy: int):
        self.events.append((EVT_OVERLAY_CLEARED, (fx, fy)))

    def of_type(self, type_code: int) -> List[Tuple]:
        return [data for code, data in self.events if code == type_code]


class EventFanout(EventSink):
    def __init__(self, *sinks):
        self.sinks = [s for s in sinks if s is not None]

    def write_header(self, rows: int, columns: int):
        for sink in self.sinks:
            sink.write_header(rows, columns)

    def log_wall_opened(self, fx: int, fy: int):
        for sink in self.sinks:
            sink.log_wall_opened(fx, fy)

    def log_overlay_set(self, fx: int, fy: int, glyph: str):
        for sink in self.sinks:
            sink.log_overlay_set(fx, fy, glyph)

    def log_overlay_cleared(self, fx: int, fy: int):
        for sink in self.sinks:
            sink.log_overlay_cleared(fx, fy)


class EventWriter(EventSink):
    def __init__(self, filename: str):
        self.filename = filename
        self.file = open(filename, "wb")

    def write_header(self, rows: int, columns: int):
        # Header: Magic "MAZELOG" + Rows (4b) + Columns (4b)
        self.file.write(MAGIC)
        self.file.write(struct.pack(">II", rows, columns))

    def log_wall_opened(self, fx: int, fy: int):
        # 1 byte type + 2b X + 2b Y
        self.file.write(struct.pack(">BHH", EVT_WALL_OPENED, fx, fy))

    def log_overlay_set(self, fx: int, fy: int, glyph: str):
        # Glyph stored as its code point, arrows are outside Latin-1
        self.file.write(struct.pack(">BHHI", EVT_OVERLAY_SET, fx, fy, ord(glyph)))

    def log_overlay_cleared(self, fx: int, fy: int):
        self.file.write(struct.pack(">BHH", EVT_OVERLAY_CLEARED, fx, fy))

    def close(self):
        if self.file:
            self.file.close()
            self.file = None


class EventReader:
    def __init__(self, filename: str):
        self.filename = filename
        self.file = open(filename, "rb")
        self.rows = 0
        self.columns = 0

    def read_header(self) -> Tuple[int, int]:
        magic = self.file.read(len(MAGIC))
        if magic != MAGIC:
            raise ValueError("Invalid event log file")
        self.rows, self.columns = struct.unpack(">II", self.read_exact(8))
        return self.rows, self.columns

    def read_exact(self, size: int) -> bytes:
        data = self.file.read(size)
        if len(data) != size:
            raise ValueError(f"Truncated event log {self.filename}")
        return data

    def stream_events(self) -> Iterator[Tuple[int, Tuple]]:
        while True:
            type_byte = self.file.read(1)
            if not type_byte:
                break

            type_code = ord(type_byte)

            if type_code == EVT_WALL_OPENED:
                yield (type_code, struct.unpack(">HH", self.read_exact(4)))

            elif type_code == EVT_OVERLAY_SET:
                fx, fy, code_point = struct.unpack(">HHI", self.read_exact(8))
                yield (type_code, (fx, fy, chr(code_point)))

            elif type_code == EVT_OVERLAY_CLEARED:
                yield (type_code, struct.unpack(">HH", self.read_exact(4)))

            else:
                raise ValueError(f"Unknown event type 0x{type_code:02x} in {self.filename}")

    def close(self):
        if self.file:
            self.file.close()
            self.file = None
