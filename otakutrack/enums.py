"""Central enum definitions for the project."""

from enum import StrEnum


class UserRole(StrEnum):
    """Site-wide user roles."""

    USER = "user"
    MODERATOR = "moderator"
    ADMIN = "admin"


class ShowType(StrEnum):
    """Release format of a show."""

    TV = "TV"
    MOVIE = "Movie"
    OVA = "OVA"
    SPECIAL = "Special"
    ONA = "ONA"


class ShowStatus(StrEnum):
    """Airing status of a show."""

    ONGOING = "Ongoing"
    COMPLETED = "Completed"
    UPCOMING = "Upcoming"
    HIATUS = "Hiatus"
    CANCELLED = "Cancelled"


class Genre(StrEnum):
    """Genres a show can be tagged with."""

    ACTION = "Action"
    ADVENTURE = "Adventure"
    COMEDY = "Comedy"
    DRAMA = "Drama"
    FANTASY = "Fantasy"
    HORROR = "Horror"
    MYSTERY = "Mystery"
    ROMANCE = "Romance"
    SCI_FI = "Sci-Fi"
    SLICE_OF_LIFE = "Slice of Life"
    THRILLER = "Thriller"
    SPORTS = "Sports"
    SUPERNATURAL = "Supernatural"
    PSYCHOLOGICAL = "Psychological"
    HISTORICAL = "Historical"
    MILITARY = "Military"
    PARODY = "Parody"
    SCHOOL = "School"
    SEINEN = "Seinen"
    SHOUJO = "Shoujo"
    SHOUNEN = "Shounen"
    JOSEI = "Josei"


class AiringSeason(StrEnum):
    """Broadcast season."""

    SPRING = "Spring"
    SUMMER = "Summer"
    FALL = "Fall"
    WINTER = "Winter"


class SourceMaterial(StrEnum):
    """Original source a show was adapted from."""

    MANGA = "Manga"
    LIGHT_NOVEL = "Light Novel"
    ORIGINAL = "Original"
    VISUAL_NOVEL = "Visual Novel"
    GAME = "Game"
    OTHER = "Other"


class AgeRating(StrEnum):
    """Content age rating."""

    G = "G"
    PG = "PG"
    PG_13 = "PG-13"
    R = "R"
    R_PLUS = "R+"
    UNKNOWN = "Unknown"


class StreamingPlatform(StrEnum):
    """Platforms a show can be streamed on."""

    CRUNCHYROLL = "Crunchyroll"
    FUNIMATION = "Funimation"
    NETFLIX = "Netflix"
    HULU = "Hulu"
    AMAZON_PRIME = "Amazon Prime"
    HIDIVE = "HIDIVE"
    VRV = "VRV"
    OTHER = "Other"


class WatchStatus(StrEnum):
    """Status of a show on a user's watchlist."""

    PLAN_TO_WATCH = "Plan to Watch"
    WATCHING = "Watching"
    COMPLETED = "Completed"
    ON_HOLD = "On Hold"
    DROPPED = "Dropped"


class ReviewReactionKind(StrEnum):
    """Reactions a user can leave on a review."""

    LIKE = "like"
    DISLIKE = "dislike"
    HELPFUL = "helpful"


class ClubCategory(StrEnum):
    """Categories of club."""

    GENERAL = "General"
    GENRE = "Genre"
    SHOW = "Show"
    SEASONAL = "Seasonal"
    DISCUSSION = "Discussion"
    FAN_ART = "Fan Art"
    COSPLAY = "Cosplay"
    GAMING = "Gaming"
    OTHER = "Other"


class ClubRole(StrEnum):
    """Role of a member within a club."""

    MEMBER = "member"
    MODERATOR = "moderator"
    ADMIN = "admin"


class AlertType(StrEnum):
    """Delivery channel for a reminder."""

    EMAIL = "email"
    IN_APP = "inApp"
    BOTH = "both"


class RecurringPattern(StrEnum):
    """How often a recurring reminder repeats."""

    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


class ReminderPriority(StrEnum):
    """Priority of a reminder."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class AlertStatus(StrEnum):
    """Read-time status of a reminder relative to now."""

    INACTIVE = "inactive"
    NO_DATE = "no-date"
    OVERDUE = "overdue"
    UPCOMING = "upcoming"
    SCHEDULED = "scheduled"


class ActivityType(StrEnum):
    """Entries in the global recent-activity feed."""

    EPISODE_WATCHED = "episode_watched"
    REVIEW_POSTED = "review_posted"
    SHOW_ADDED = "show_added"
    CLUB_JOINED = "club_joined"


class ClubActivity(StrEnum):
    """Club interactions tracked in user analytics."""

    POST = "post"
    LIKE = "like"
    JOIN = "join"
    POLL_VOTE = "poll_vote"
