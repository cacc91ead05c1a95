"""Application constants."""

EXIT_SUCCESS = 0
EXIT_HARD_FAIL = 20

DEFAULT_CONFIG_PATH = "config/zonemap.yml"
DEFAULT_ZONES_PATH = "data/mossgate-zones.geojson"
DEFAULT_CODEPOINT_PATH = "data/LA.csv"
DEFAULT_PREFIX = "LA32"
DEFAULT_OUT_PATH = "data/la3-2-zone-map.csv"

# Code-Point Open is headerless; positions are fixed by the product spec.
CODEPOINT_POSTCODE_COLUMN = 0
CODEPOINT_EASTING_COLUMN = 2
CODEPOINT_NORTHING_COLUMN = 3

ZONE_KEY_PROPERTIES = ("zone_key", "zoneKey", "name")
POLYGONAL_GEOMETRY_TYPES = ("Polygon", "MultiPolygon")

# OSGB36 / British National Grid with the 7-parameter Helmert shift to WGS84.
BNG_PROJ4 = (
    "+proj=tmerc +lat_0=49 +lon_0=-2 +k=0.9996012717 +x_0=400000 +y_0=-100000 "
    "+ellps=airy +towgs84=446.448,-125.157,542.06,0.15,0.247,0.842,-20.489 "
    "+units=m +no_defs"
)
WGS84_EPSG = 4326

OUTPUT_HEADERS = ["postcode", "zone_key", "lat", "lng"]
COORDINATE_DECIMALS = 6

JSON_LOG_FIELDS = (
    "timestamp",
    "run_id",
    "stage",
    "source",
    "event",
    "status",
    "duration_ms",
    "rows_in",
    "rows_out",
    "error_code",
    "message",
)
