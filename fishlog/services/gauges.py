"""
Reference list of USGS stream gauges.

A curated set of popular fishing rivers used for autocomplete when adding a
gauge or filling in a journal entry. Any valid USGS site number can still be
saved directly.
"""

from dataclasses import dataclass

MIN_QUERY_LENGTH = 3
MAX_RESULTS = 10


@dataclass(frozen=True)
class GaugeSite:
    site_number: str
    display_name: str
    state: str


REFERENCE_GAUGES = [
    GaugeSite("05331000", "Mississippi River at St. Paul, MN", "MN"),
    GaugeSite("05330000", "Minnesota River at Jordan, MN", "MN"),
    GaugeSite("05340500", "St. Croix River at Stillwater, MN", "MN"),
    GaugeSite("05288500", "Mississippi River at Fridley, MN", "MN"),
    GaugeSite("05366800", "Chippewa River at Grand Ave at Eau Claire, WI", "WI"),
    GaugeSite("05365500", "Chippewa River at Chippewa Falls, WI", "WI"),
    GaugeSite("05370000", "Eau Galle River at Spring Valley, WI", "WI"),
    GaugeSite("05345000", "Vermillion River Near Empire, MN", "MN"),
    GaugeSite("05342000", "Kinnickinnic River Near River Falls, WI", "WI"),
    GaugeSite("05362000", "Jump River at Sheldon, WI", "WI"),
    GaugeSite("05359500", "South Fork Flambeau River Near Phillips, WI", "WI"),
    GaugeSite("05356000", "Chippewa River Near Bruce, WI", "WI"),
    GaugeSite("05394500", "Prairie River Near Merrill, WI", "WI"),
    GaugeSite("05395000", "Wisconsin River at Merrill, WI", "WI"),
    GaugeSite("05393700", "Spirit River at Spirit Falls, WI", "WI"),
    GaugeSite("09380000", "Colorado River at Lees Ferry, AZ", "AZ"),
    GaugeSite("06191500", "Yellowstone River at Corwin Springs, MT", "MT"),
    GaugeSite("12358500", "Clark Fork at Deer Lodge, MT", "MT"),
    GaugeSite("13337000", "Snake River at Anatone, WA", "WA"),
    GaugeSite("14211720", "Sandy River below Bull Run River, OR", "OR"),
    GaugeSite("01463500", "Delaware River at Trenton, NJ", "NJ"),
    GaugeSite("03086000", "Beaver River at Beaver Falls, PA", "PA"),
    GaugeSite("01632000", "South Fork Shenandoah River at Front Royal, VA", "VA"),
    GaugeSite("02102908", "Haw River at Bynum, NC", "NC"),
    GaugeSite("02334430", "Chattahoochee River at Buford Dam, GA", "GA"),
    GaugeSite("08158000", "Colorado River at Austin, TX", "TX"),
    GaugeSite("11421000", "Yuba River below Englebright Dam, CA", "CA"),
    GaugeSite("11418000", "North Yuba River below Goodyears Bar, CA", "CA"),
    GaugeSite("11419600", "South Yuba River at Langs Crossing, CA", "CA"),
    GaugeSite("11417500", "South Yuba River near Grass Valley, CA", "CA"),
    GaugeSite("11410500", "Bear River near Auburn, CA", "CA"),
    GaugeSite("11407000", "Feather River at Nicolaus, CA", "CA"),
    GaugeSite("11407150", "Sacramento River at Verona, CA", "CA"),
    GaugeSite("11404500", "American River at Fair Oaks, CA", "CA"),
    GaugeSite("11394500", "Middle Fork Feather River near Merrimac, CA", "CA"),
    GaugeSite("11425500", "Sacramento River above Bend Bridge, CA", "CA"),
    GaugeSite("11342000", "Pit River near Canby, CA", "CA"),
    GaugeSite("11447650", "Sacramento River at Freeport, CA", "CA"),
    GaugeSite("11455420", "Napa River at St. Helena, CA", "CA"),
    GaugeSite("11447890", "American River at Sacramento, CA", "CA"),
    GaugeSite("11447905", "Sacramento River at Garcia Bend, CA", "CA"),
    GaugeSite("11446500", "American River at H St Bridge at Sacramento, CA", "CA"),
    GaugeSite("11447000", "Sacramento River at I Street Bridge, CA", "CA"),
    GaugeSite("11446980", "American River below Nimbus Dam, CA", "CA"),
    GaugeSite("11446220", "American River below Folsom Dam, CA", "CA"),
    GaugeSite("11426500", "Sacramento River at Knights Landing, CA", "CA"),
]


def search_gauges(query: str, limit: int = MAX_RESULTS) -> list[GaugeSite]:
    """
    Case-insensitive substring search over gauge names and site numbers.

    Queries shorter than three characters return nothing.
    """
    term = (query or "").strip().lower()
    if len(term) < MIN_QUERY_LENGTH:
        return []
    matches = [
        gauge for gauge in REFERENCE_GAUGES
        if term in gauge.display_name.lower() or gauge.site_number.startswith(term)
    ]
    return matches[:limit]
