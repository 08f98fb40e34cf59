"""EXIF/TIFF tag identifiers and JPEG marker constants."""

# JPEG markers (second byte after 0xFF)
MARKER_PREFIX = 0xFF
SOI = 0xD8
EOI = 0xD9
SOS = 0xDA
APP1 = 0xE1
TEM = 0x01
RST_MARKERS = range(0xD0, 0xD8)

EXIF_SIGNATURE = b"Exif\x00\x00"

# TIFF header
BYTE_ORDER_LITTLE = b"II"
BYTE_ORDER_BIG = b"MM"
TIFF_MAGIC = 0x002A

IFD_ENTRY_SIZE = 12

# IFD0 (main image) tags
MAKE = 0x010F
MODEL = 0x0110
ORIENTATION = 0x0112
DATE_TIME = 0x0132
EXIF_IFD_POINTER = 0x8769
GPS_IFD_POINTER = 0x8825

# EXIF SubIFD tags
DATE_TIME_ORIGINAL = 0x9003

# GPS IFD tags
GPS_LATITUDE_REF = 0x0001
GPS_LATITUDE = 0x0002
GPS_LONGITUDE_REF = 0x0003
GPS_LONGITUDE = 0x0004
GPS_ALTITUDE_REF = 0x0005
GPS_ALTITUDE = 0x0006

TAG_NAMES = {
    MAKE: "Make",
    MODEL: "Model",
    ORIENTATION: "Orientation",
    DATE_TIME: "DateTime",
    EXIF_IFD_POINTER: "ExifIFDPointer",
    GPS_IFD_POINTER: "GPSIFDPointer",
    DATE_TIME_ORIGINAL: "DateTimeOriginal",
}

GPS_TAG_NAMES = {
    GPS_LATITUDE_REF: "GPSLatitudeRef",
    GPS_LATITUDE: "GPSLatitude",
    GPS_LONGITUDE_REF: "GPSLongitudeRef",
    GPS_LONGITUDE: "GPSLongitude",
    GPS_ALTITUDE_REF: "GPSAltitudeRef",
    GPS_ALTITUDE: "GPSAltitude",
}
