from pydantic import BaseModel, field_validator


class JoinTrackRequest(BaseModel):
    track_id: str

    @field_validator("track_id")
    @classmethod
    def validate_track_id(cls, v):
        v = v.strip()
        if not v:
            raise ValueError("Track ID is not in valid format")
        return v
