"""Pydantic schemas for archive records.

Records are validated at ingress (every payload coming back from the data
provider) and are frozen afterwards: the browser never edits a record, it
only swaps whole records in and out of its caches.
"""
from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field


class AgeBucket(str, Enum):
    """Contributor age ranges as stored by the archive."""

    EIGHTEEN_TO_TWENTYFOUR = "eighteen_to_twentyfour"
    TWENTYFIVE_TO_THIRTYFOUR = "twentyfive_to_thirtyfour"
    THIRTYFIVE_TO_FORTYFOUR = "thirtyfive_to_fortyfour"
    FORTYFIVE_TO_FIFTYFOUR = "fortyfive_to_fiftyfour"
    FIFTYFIVE_TO_SIXTYFOUR = "fiftyfive_to_sixtyfour"
    SIXTYFIVE_PLUS = "sixtyfive_plus"


class _ArchiveModel(BaseModel):
    model_config = ConfigDict(frozen=True, extra="allow", populate_by_name=True)


class Location(_ArchiveModel):
    city: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None
    geolocation: Optional[str] = None


class Contributor(_ArchiveModel):
    name: Optional[str] = None
    age_bucket: Optional[AgeBucket] = None
    gender: Optional[str] = None
    ethnicity: Optional[str] = None
    nationality: Optional[str] = None
    languages_spoken: List[str] = Field(default_factory=list)
    occupation: Optional[str] = None


class Collector(_ArchiveModel):
    name: Optional[str] = None
    gender: Optional[str] = None
    collector_comments: Optional[str] = None


class Context(_ArchiveModel):
    use_context: Optional[str] = None
    cultural_background: Optional[str] = None
    collection_context: Optional[str] = None


class Analysis(_ArchiveModel):
    context: Context = Field(default_factory=Context)
    interpretation: Optional[str] = None
    collector_comments: Optional[str] = None


class Folklore(_ArchiveModel):
    item: Optional[str] = None
    genre: Optional[str] = None
    language_of_origin: Optional[str] = None
    medium: Optional[str] = None
    translation: Optional[str] = None
    place_mentioned: List[Location] = Field(default_factory=list)


class FolkloreRecord(_ArchiveModel):
    """A single collected folklore item with its provenance."""

    id: str = Field(..., alias="_id", min_length=1)
    filename: Optional[str] = None
    contributor: Contributor = Field(default_factory=Contributor)
    folklore: Folklore = Field(default_factory=Folklore)
    collector: Collector = Field(default_factory=Collector)
    analysis: Analysis = Field(default_factory=Analysis)
    storage_medium: Optional[str] = None
    cleaned_full_text: Optional[str] = None
    date_collected: Optional[str] = None
    location_collected: Location = Field(default_factory=Location)
