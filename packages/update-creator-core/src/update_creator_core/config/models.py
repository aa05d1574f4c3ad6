from pydantic import BaseModel, Field, field_validator
from typing import Literal


class DiffConfig(BaseModel):
    algorithm: Literal["md5", "sha1", "sha256"] = "md5"
    features_root: str | None = "repository/components/features"
    collapse_removed_directories: bool = True

    @field_validator("features_root")
    @classmethod
    def normalize_features_root(cls, v: str | None) -> str | None:
        if v is None:
            return None
        v = v.strip().strip("/")
        return v or None


class UpdateConfig(BaseModel):
    name_prefix: str = Field(default="WSO2-CARBON-UPDATE", min_length=1)
    descriptor_file: str = "update-descriptor.yaml"
    license_file: str = "LICENSE.txt"
    carbon_home: str = "carbon.home"
    staging_dir: str = ".update-creator/staging"
    resource_files_mandatory: list[str] = Field(default_factory=lambda: ["LICENSE.txt"])
    resource_files_optional: list[str] = Field(default_factory=lambda: [
        "instructions.txt", "NOT_A_CONTRIBUTION.txt"
    ])


class CreatorConfig(BaseModel):
    diff: DiffConfig = Field(default_factory=DiffConfig)
    update: UpdateConfig = Field(default_factory=UpdateConfig)
    log_level: Literal["debug", "info", "warn", "error"] = "info"
