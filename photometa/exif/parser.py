"""EXIF metadata extraction from JPEG bytes.

Walks the JPEG segment list to the ``Exif`` APP1 segment, then the TIFF
header and its Image File Directories (IFD0, the EXIF SubIFD and the GPS
IFD), decoding a small set of tags into an ``ExtractedMetadata`` record.

Extraction is advisory: malformed, truncated or non-JPEG input never raises,
it only leaves fields absent. ``extract_with_warnings`` additionally reports
what had to be skipped.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Tuple

from photometa.exceptions import ExifDecodeError
from photometa.exif import tags
from photometa.exif.models import ExtractedMetadata, ExtractionResult
from photometa.exif.reader import TiffReader

logger = logging.getLogger(__name__)

_EXIF_DATE = re.compile(
    r"([0-9]{4}):([0-9]{2}):([0-9]{2}) ([0-9]{2}):([0-9]{2}):([0-9]{2})"
)


@dataclass(frozen=True)
class IFDEntry:
    """One 12-byte directory entry.

    Attributes:
        tag: Tag identifier
        type: TIFF field type
        count: Number of values
        value_offset: Offset of the entry's 4-byte value field
    """
    tag: int
    type: int
    count: int
    value_offset: int


@dataclass(frozen=True)
class IFDResult:
    """Fields decoded from a single IFD, plus what was skipped."""
    fields: Dict[str, Any] = field(default_factory=dict)
    warnings: Tuple[str, ...] = ()


Handler = Callable[[TiffReader, IFDEntry], Dict[str, Any]]


def normalize_exif_date(value: str) -> str:
    """Convert ``YYYY:MM:DD HH:MM:SS`` to ISO-8601.

    Anything not in exactly that shape is returned unchanged.

    Examples:
        >>> normalize_exif_date("2024:03:15 10:30:00")
        '2024-03-15T10:30:00'
    """
    match = _EXIF_DATE.fullmatch(value)
    if not match:
        return value
    year, month, day, hour, minute, second = match.groups()
    return f"{year}-{month}-{day}T{hour}:{minute}:{second}"


def dms_to_decimal(dms: List[float], ref: str) -> float:
    """Convert (degrees, minutes, seconds) to decimal degrees.

    Args:
        dms: Degrees, minutes and seconds
        ref: Hemisphere reference ('N', 'S', 'E', 'W')

    Returns:
        Decimal degrees rounded to 6 places, negative for South/West
    """
    decimal = dms[0] + dms[1] / 60.0 + dms[2] / 3600.0
    if ref in ("S", "W"):
        decimal = -decimal
    return round(decimal, 6)


# Tag handlers. Each returns the partial fields it decoded; an empty dict
# means "nothing usable".

def _read_string(reader: TiffReader, entry: IFDEntry) -> str:
    if entry.count <= 4:
        offset = entry.value_offset
    else:
        offset = reader.u32(entry.value_offset)
    return reader.ascii(offset, entry.count)


def _string(name: str) -> Handler:
    def handler(reader: TiffReader, entry: IFDEntry) -> Dict[str, Any]:
        value = _read_string(reader, entry)
        return {name: value} if value else {}
    return handler


def _pointer(name: str) -> Handler:
    def handler(reader: TiffReader, entry: IFDEntry) -> Dict[str, Any]:
        offset = reader.u32(entry.value_offset)
        return {name: offset} if offset else {}
    return handler


def _reference(name: str) -> Handler:
    def handler(reader: TiffReader, entry: IFDEntry) -> Dict[str, Any]:
        return {name: chr(reader.u8(entry.value_offset))}
    return handler


def _byte(name: str) -> Handler:
    def handler(reader: TiffReader, entry: IFDEntry) -> Dict[str, Any]:
        return {name: reader.u8(entry.value_offset)}
    return handler


def _rationals(name: str, count: int) -> Handler:
    # Rationals are 8 bytes each, so they never fit inline.
    def handler(reader: TiffReader, entry: IFDEntry) -> Dict[str, Any]:
        return {name: reader.rationals(reader.u32(entry.value_offset), count)}
    return handler


def _orientation(reader: TiffReader, entry: IFDEntry) -> Dict[str, Any]:
    value = reader.u16(entry.value_offset)
    if not 1 <= value <= 8:
        raise ExifDecodeError(f"orientation {value} is outside 1-8")
    return {"orientation": value}


IFD0_HANDLERS: Dict[int, Handler] = {
    tags.MAKE: _string("make"),
    tags.MODEL: _string("model"),
    tags.ORIENTATION: _orientation,
    tags.DATE_TIME: _string("date_time"),
    tags.EXIF_IFD_POINTER: _pointer("exif_ifd"),
    tags.GPS_IFD_POINTER: _pointer("gps_ifd"),
}

EXIF_HANDLERS: Dict[int, Handler] = {
    tags.DATE_TIME_ORIGINAL: _string("date_time_original"),
}

GPS_HANDLERS: Dict[int, Handler] = {
    tags.GPS_LATITUDE_REF: _reference("latitude_ref"),
    tags.GPS_LATITUDE: _rationals("latitude", 3),
    tags.GPS_LONGITUDE_REF: _reference("longitude_ref"),
    tags.GPS_LONGITUDE: _rationals("longitude", 3),
    tags.GPS_ALTITUDE_REF: _byte("altitude_ref"),
    tags.GPS_ALTITUDE: _rationals("altitude", 1),
}


def walk_ifd(
    reader: TiffReader,
    offset: int,
    handlers: Dict[int, Handler],
    label: str = "IFD",
) -> IFDResult:
    """Decode one IFD using a tag -> handler table.

    Entries whose tag has no handler are passed over. An entry that cannot
    be decoded is skipped and noted; the walk continues with the next one.

    Args:
        reader: Reader over the TIFF block
        offset: IFD offset relative to the TIFF block
        handlers: Mapping of tag id to handler
        label: Name used in warnings ("IFD0", "GPS IFD", ...)

    Returns:
        IFDResult with this IFD's fields only
    """
    if not reader.in_range(offset, 2):
        return IFDResult(warnings=(f"{label} at offset {offset} is out of range",))

    decoded: Dict[str, Any] = {}
    warnings: List[str] = []
    count = reader.u16(offset)

    for i in range(count):
        entry_offset = offset + 2 + i * tags.IFD_ENTRY_SIZE
        if not reader.in_range(entry_offset, tags.IFD_ENTRY_SIZE):
            warnings.append(f"{label} truncated after {i} of {count} entries")
            break

        entry = IFDEntry(
            tag=reader.u16(entry_offset),
            type=reader.u16(entry_offset + 2),
            count=reader.u32(entry_offset + 4),
            value_offset=entry_offset + 8,
        )
        handler = handlers.get(entry.tag)
        if handler is None:
            continue

        try:
            decoded.update(handler(reader, entry))
        except ExifDecodeError as e:
            name = tags.TAG_NAMES.get(entry.tag) or tags.GPS_TAG_NAMES.get(entry.tag)
            warnings.append(f"{label}: skipped {name or hex(entry.tag)}: {e}")

    return IFDResult(fields=decoded, warnings=tuple(warnings))


def _gps_metadata(
    gps: Dict[str, Any], apply_altitude_ref: bool
) -> Tuple[ExtractedMetadata, List[str]]:
    values: Dict[str, Any] = {}
    warnings: List[str] = []

    for name, ref_name, default_ref, limit in (
        ("latitude", "latitude_ref", "N", 90.0),
        ("longitude", "longitude_ref", "E", 180.0),
    ):
        dms = gps.get(name)
        if not dms or len(dms) != 3:
            continue
        decimal = dms_to_decimal(dms, gps.get(ref_name, default_ref))
        if abs(decimal) > limit:
            warnings.append(f"GPS IFD: {name} {decimal} is out of range")
            continue
        values[name] = decimal

    altitude = gps.get("altitude")
    if altitude:
        meters = altitude[0]
        if apply_altitude_ref and meters and gps.get("altitude_ref") == 1:
            meters = -meters
        values["altitude"] = meters

    return ExtractedMetadata(**values), warnings


def parse_tiff(block: memoryview, apply_altitude_ref: bool = True) -> ExtractionResult:
    """Decode the TIFF structure that follows the ``Exif\\0\\0`` signature.

    Args:
        block: The TIFF block, from the byte-order mark to the segment end
        apply_altitude_ref: Negate altitude when GPSAltitudeRef says
            "below sea level"

    Returns:
        ExtractionResult for this block
    """
    if len(block) < 8:
        return ExtractionResult(warnings=("TIFF header is truncated",))

    byte_order = bytes(block[:2])
    if byte_order == tags.BYTE_ORDER_LITTLE:
        little_endian = True
    elif byte_order == tags.BYTE_ORDER_BIG:
        little_endian = False
    else:
        return ExtractionResult(warnings=(f"unknown TIFF byte order {byte_order!r}",))

    reader = TiffReader(block, little_endian)
    magic = reader.u16(2)
    if magic != tags.TIFF_MAGIC:
        return ExtractionResult(warnings=(f"bad TIFF magic number 0x{magic:04X}",))

    ifd0 = walk_ifd(reader, reader.u32(4), IFD0_HANDLERS, "IFD0")
    exif = IFDResult()
    gps = IFDResult()
    if "exif_ifd" in ifd0.fields:
        exif = walk_ifd(reader, ifd0.fields["exif_ifd"], EXIF_HANDLERS, "EXIF IFD")
    if "gps_ifd" in ifd0.fields:
        gps = walk_ifd(reader, ifd0.fields["gps_ifd"], GPS_HANDLERS, "GPS IFD")

    date_taken = exif.fields.get("date_time_original") or ifd0.fields.get("date_time")
    metadata = ExtractedMetadata(
        date_taken=normalize_exif_date(date_taken) if date_taken else None,
        make=ifd0.fields.get("make"),
        model=ifd0.fields.get("model"),
        orientation=ifd0.fields.get("orientation"),
    )
    gps_metadata, gps_warnings = _gps_metadata(gps.fields, apply_altitude_ref)

    return ExtractionResult(
        metadata=metadata.merged(gps_metadata),
        warnings=ifd0.warnings + exif.warnings + gps.warnings + tuple(gps_warnings),
    )


def find_tiff_block(data: memoryview) -> Tuple[Optional[memoryview], List[str]]:
    """Scan JPEG segments for the first ``Exif`` APP1 segment.

    Args:
        data: Whole JPEG file, already known to start with SOI

    Returns:
        Tuple of (TIFF block or None, warnings)
    """
    warnings: List[str] = []
    length = len(data)
    offset = 2

    while offset < length:
        if data[offset] != tags.MARKER_PREFIX:
            offset += 1
            continue
        if offset + 1 >= length:
            break

        marker = data[offset + 1]
        if marker == tags.MARKER_PREFIX:
            # fill byte
            offset += 1
            continue
        if marker in (tags.SOS, tags.EOI):
            break
        if marker in tags.RST_MARKERS or marker == tags.TEM:
            offset += 2
            continue

        if offset + 4 > length:
            warnings.append(f"segment 0x{marker:02X} at offset {offset} is truncated")
            break
        segment_length = int.from_bytes(data[offset + 2:offset + 4], "big")
        segment_end = offset + 2 + segment_length
        if segment_length < 2:
            warnings.append(
                f"segment 0x{marker:02X} at offset {offset} has invalid length {segment_length}"
            )
            break

        overrun = segment_end > length
        if overrun:
            warnings.append(
                f"segment 0x{marker:02X} at offset {offset} declares "
                f"{segment_length} bytes, past end of data"
            )

        if marker == tags.APP1:
            payload = offset + 4
            if bytes(data[payload:payload + 6]) == tags.EXIF_SIGNATURE:
                # A cut-off segment still yields whatever IFDs made it in
                return data[payload + 6:min(segment_end, length)], warnings

        if overrun:
            break
        offset = segment_end

    return None, warnings


def extract_with_warnings(data: Any, apply_altitude_ref: bool = True) -> ExtractionResult:
    """Extract EXIF metadata and report anything skipped along the way.

    Never raises. Non-JPEG input and JPEGs without EXIF give an empty
    record without warnings; damaged EXIF gives a partial record with
    warnings.

    Args:
        data: Image bytes (bytes, bytearray or memoryview)
        apply_altitude_ref: Negate altitude when GPSAltitudeRef is 1

    Returns:
        ExtractionResult
    """
    try:
        try:
            view = memoryview(data).cast("B")
        except TypeError:
            return ExtractionResult(warnings=("input is not a bytes-like object",))

        if len(view) < 2 or view[0] != tags.MARKER_PREFIX or view[1] != tags.SOI:
            logger.debug("Not a JPEG (missing SOI marker), skipping EXIF")
            return ExtractionResult()

        block, scan_warnings = find_tiff_block(view)
        if block is None:
            logger.debug("No EXIF APP1 segment found")
            return ExtractionResult(warnings=tuple(scan_warnings))

        result = parse_tiff(block, apply_altitude_ref)
        warnings = tuple(scan_warnings) + result.warnings
        for warning in warnings:
            logger.debug(f"EXIF: {warning}")
        return ExtractionResult(metadata=result.metadata, warnings=warnings)

    except Exception as e:
        logger.debug(f"EXIF extraction aborted: {e}", exc_info=True)
        return ExtractionResult(warnings=(f"unexpected decode failure: {e}",))


def extract(data: Any, apply_altitude_ref: bool = True) -> ExtractedMetadata:
    """Extract EXIF metadata from JPEG bytes.

    Args:
        data: Image bytes (bytes, bytearray or memoryview)
        apply_altitude_ref: Negate altitude when GPSAltitudeRef is 1

    Returns:
        ExtractedMetadata, possibly empty. Never raises.

    Examples:
        >>> metadata = extract(upload_bytes)
        >>> if metadata.has_coordinates:
        ...     print(f"Photo taken at: {metadata.latitude}, {metadata.longitude}")
    """
    return extract_with_warnings(data, apply_altitude_ref).metadata
