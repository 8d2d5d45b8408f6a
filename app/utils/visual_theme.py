"""
Visual theme classification for gigs.
Maps gig metadata to a presentation theme, used to pick fallback artwork when
a gig has no hero image of its own.
"""
import enum
from typing import Any, Dict, List, Mapping, Optional


class VisualTheme(enum.Enum):
    """Presentation themes with their own fallback artwork."""
    WEDDING_PARTY = 'weddingParty'
    COFFEEHOUSE = 'coffeehouse'
    BAR_GIG = 'barGig'
    JAZZ_CLUB = 'jazzClub'
    CLUB_STAGE = 'clubStage'
    CORPORATE_EVENT = 'corporateEvent'
    FESTIVAL_STAGE = 'festivalStage'
    REHEARSAL_ROOM = 'rehearsalRoom'
    GENERIC_MUSIC = 'genericMusic'


DEFAULT_IMAGE_BASE = '/gig-fallbacks'

GIG_TYPE_THEMES = {
    'wedding': VisualTheme.WEDDING_PARTY,
    'club_show': VisualTheme.CLUB_STAGE,
    'corporate': VisualTheme.CORPORATE_EVENT,
    'bar_gig': VisualTheme.BAR_GIG,
    'coffee_house': VisualTheme.COFFEEHOUSE,
    'festival': VisualTheme.FESTIVAL_STAGE,
    'rehearsal': VisualTheme.REHEARSAL_ROOM,
}

# Ordered: the first theme with a matching keyword wins.
VENUE_KEYWORDS = {
    VisualTheme.COFFEEHOUSE: ['coffee', 'café', 'cafe', 'roastery', 'house', 'grind', 'barista'],
    VisualTheme.BAR_GIG: ['bar', 'pub', 'tavern', 'lounge', 'taproom'],
    VisualTheme.JAZZ_CLUB: ['jazz', 'note', 'stage', 'theatre', 'theater', 'hall'],
    VisualTheme.CORPORATE_EVENT: ['hotel', 'ballroom', 'conference', 'center', 'convention', 'event space'],
    VisualTheme.FESTIVAL_STAGE: ['park', 'arena', 'stadium', 'square', 'festival', 'fairground'],
}

VENUE_KEYWORDS_HE = {
    VisualTheme.COFFEEHOUSE: ['קפה', 'בית קפה', 'קליה', 'ביסטרו'],
    VisualTheme.BAR_GIG: ['בר', 'פאב', 'טברנה', 'לאונז'],
    VisualTheme.JAZZ_CLUB: ["ג'אז", 'מועדון', 'סטודיו', 'תאטרון', 'אולם'],
    VisualTheme.CORPORATE_EVENT: ['מלון', 'אולם', 'כנס', 'מרכז', 'אירוע חברתי'],
    VisualTheme.FESTIVAL_STAGE: ['פסטיבל', 'גן', 'ארנה', 'רחוב', 'פתח אוויר'],
}

CONTENT_KEYWORDS = {
    VisualTheme.JAZZ_CLUB: ['jazz', 'trio', 'quartet', 'swing'],
    VisualTheme.COFFEEHOUSE: ['acoustic', 'unplugged', 'duo', 'solo'],
    VisualTheme.WEDDING_PARTY: ['wedding', 'chuppah', 'simcha', 'ceremony', 'bride', 'groom'],
    VisualTheme.CORPORATE_EVENT: ['corporate', 'gala', 'awards', 'conference'],
    VisualTheme.FESTIVAL_STAGE: ['festival', 'open air', 'outdoor'],
    VisualTheme.CLUB_STAGE: ['hip hop', 'funk', 'party', 'night', 'club', 'dj'],
}

CONTENT_KEYWORDS_HE = {
    VisualTheme.JAZZ_CLUB: ["ג'אז", "ג'ז", 'טריו', 'קוורטט', 'סווינג'],
    VisualTheme.COFFEEHOUSE: ['אקוסטי', 'אקוסטית', 'דואו', 'סולו', 'שירה אקוסטית'],
    VisualTheme.WEDDING_PARTY: ['חתונה', 'חופה', 'סימחה', 'טקס', 'חתן', 'כלה'],
    VisualTheme.CORPORATE_EVENT: ['חברתי', 'קורפורטיבי', 'גאלה', 'כנס', 'אירוע'],
    VisualTheme.FESTIVAL_STAGE: ['פסטיבל', 'פסטיבלים', 'פתוח', 'פתח אוויר'],
    VisualTheme.CLUB_STAGE: ['מועדון', 'ריקודים', 'דיסקו', 'מסיבה', 'פסטה'],
}

THEME_IMAGES = {
    VisualTheme.WEDDING_PARTY: ['wedding-1.jpeg', 'wedding-2.jpeg'],
    VisualTheme.COFFEEHOUSE: ['coffeehouse-1.jpeg', 'coffeehouse-2.jpeg'],
    VisualTheme.BAR_GIG: ['bar-1.jpeg', 'bar-2.jpeg'],
    VisualTheme.JAZZ_CLUB: ['jazz-club-1.jpeg', 'jazz-club-2.jpeg'],
    VisualTheme.CLUB_STAGE: ['club-stage-1.jpeg', 'club-stage-2.jpeg'],
    VisualTheme.CORPORATE_EVENT: ['corporate-1.jpeg', 'corporate-2.jpeg'],
    VisualTheme.FESTIVAL_STAGE: ['festival-1.jpeg', 'festival-2.jpeg'],
    VisualTheme.REHEARSAL_ROOM: ['rehearsal-1.jpeg'],
    VisualTheme.GENERIC_MUSIC: ['generic-1.jpeg', 'generic-2.jpeg'],
}


def theme_for_gig_type(gig_type: Optional[str]) -> Optional[VisualTheme]:
    """Direct mapping for an explicit gig type; None when unknown."""
    if not gig_type:
        return None
    return GIG_TYPE_THEMES.get(gig_type)


def has_keywords(text: Optional[str], keywords: List[str]) -> bool:
    """Case-insensitive substring match of any keyword."""
    if not text:
        return False
    lower_text = text.lower()
    return any(keyword in lower_text for keyword in keywords)


def _match_tables(text: str, *tables: Dict[VisualTheme, List[str]]) -> Optional[VisualTheme]:
    for table in tables:
        for theme, keywords in table.items():
            if keywords and has_keywords(text, keywords):
                return theme
    return None


def classify_gig_visual_theme(gig: Mapping[str, Any],
                              band: Optional[Mapping[str, Any]] = None) -> VisualTheme:
    """
    Pick a visual theme for a gig.

    Order, first match wins:
    1. explicit gig_type
    2. venue name keywords (English, then Hebrew)
    3. title + band name keywords (English, then Hebrew)
    4. generic music

    Args:
        gig: GigPack document (or any mapping with gig_type, venue_name,
            title, band_name)
        band: Optional band mapping with a name

    Returns:
        VisualTheme
    """
    type_theme = theme_for_gig_type(gig.get('gig_type'))
    if type_theme:
        return type_theme

    venue_name = gig.get('venue_name')
    if venue_name:
        theme = _match_tables(venue_name, VENUE_KEYWORDS, VENUE_KEYWORDS_HE)
        if theme:
            return theme

    content_text = ' '.join(
        part for part in (gig.get('title'), gig.get('band_name'), (band or {}).get('name'))
        if part
    )
    if content_text:
        theme = _match_tables(content_text, CONTENT_KEYWORDS, CONTENT_KEYWORDS_HE)
        if theme:
            return theme

    return VisualTheme.GENERIC_MUSIC


def stable_hash(value: str) -> int:
    """
    32-bit signed rolling hash (h = h * 31 + char code).
    Deterministic across processes, unlike the builtin hash() for strings.
    """
    result = 0
    for char in value:
        result = (result * 31 + ord(char)) & 0xFFFFFFFF
    if result >= 0x80000000:
        result -= 0x100000000
    return result


def pick_fallback_image(theme: VisualTheme, gig_id=None, base: str = DEFAULT_IMAGE_BASE) -> str:
    """
    Pick a fallback image for a theme.

    Themes with several images are disambiguated by a hash of the gig id, so
    the same gig always gets the same picture.
    """
    images = THEME_IMAGES.get(theme) or THEME_IMAGES[VisualTheme.GENERIC_MUSIC]
    if len(images) == 1 or gig_id is None or gig_id == '':
        filename = images[0]
    else:
        filename = images[abs(stable_hash(str(gig_id))) % len(images)]
    return f"{base.rstrip('/')}/{filename}"


def resolve_artwork(gig: Mapping[str, Any],
                    band: Optional[Mapping[str, Any]] = None,
                    base: str = DEFAULT_IMAGE_BASE) -> Dict[str, Any]:
    """Theme plus the image to display: the gig's own hero image or a fallback."""
    theme = classify_gig_visual_theme(gig, band)
    fallback = pick_fallback_image(theme, gig.get('id'), base)
    hero = gig.get('hero_image_url')
    return {
        'theme': theme.value,
        'image_url': hero or fallback,
        'is_fallback': not hero,
    }
