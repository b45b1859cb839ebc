from typing import Iterator, Optional

from Codesize.core.errors import DecodeInconsistency

def iter_source_ids(source_map: Optional[str]) -> Iterator[Optional[int]]:
    """
    Yields the source id field of each solc source map entry, in emission order.
    Entries look like `start:length:sourceId[:jump[:modifierDepth]]`; an entry that
    omits the third field yields None, meaning "same as the previous entry".
    """
    if not source_map:
        return
    for entry in source_map.split(";"):
        fields = entry.split(":")
        if len(fields) >= 3 and fields[2]:
            try:
                source_id = int(fields[2])
            except ValueError:
                raise DecodeInconsistency(f"Malformed source map entry: {entry!r}")
            yield source_id
        else:
            yield None
