# Copyright (C) 2023 Deforum LLC
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU Affero General Public License as published by
# the Free Software Foundation, version 3 of the License.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE. See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU Affero General Public License
# along with this program. If not, see <https://www.gnu.org/licenses/>.

# Contact the authors: https://deforum.github.io/

from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from typing import List, Literal, Optional
from dataclasses import dataclass, field
from enum import Enum


OverlapType = Literal["none", "linear", "custom"]
CommonPromptPos = Literal["append", "prepend", "template"]

OVERLAP_TYPES = ("none", "linear", "custom")
COMMON_PROMPT_POSITIONS = ("append", "prepend", "template")


class Overlap(BaseModel):
    """Fade configuration of a prompt.

    in_frames/out_frames only apply when type is "linear" and custom only when
    type is "custom". Switching type never clears the inactive fields.
    """
    model_config = ConfigDict(populate_by_name=True)

    type: OverlapType = "none"
    in_frames: int = Field(default=0, alias="inFrames")
    out_frames: int = Field(default=0, alias="outFrames")
    custom: str = "prompt_weight_1"


class Prompt(BaseModel):
    """A named positive/negative prompt pair active over a frame interval."""
    model_config = ConfigDict(populate_by_name=True)

    name: str = ""
    positive: str = ""
    negative: str = ""
    all_frames: bool = Field(default=False, alias="allFrames")
    from_: int = Field(default=0, alias="from")
    to: int = 0
    overlap: Overlap = Field(default_factory=Overlap)
    enabled: Optional[bool] = None

    @property
    def is_enabled(self) -> bool:
        return self.enabled is None or self.enabled

    def span(self, last_frame: int) -> tuple[int, int]:
        """Interval the prompt is active over, honouring all_frames."""
        if self.all_frames:
            return 0, last_frame
        return self.from_, self.to


class PromptSet(BaseModel):
    """Canonical, versioned collection of timed prompts.

    Insertion order of prompt_list is timeline order, not frame order.
    Older documents tagged the version as "format", which is still accepted
    on input; output always uses "formatVersion".
    """
    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "formatVersion": "v2",
                "enabled": True,
                "promptList": [{
                    "name": "Prompt 1",
                    "positive": "a cat",
                    "negative": "blurry",
                    "allFrames": False,
                    "from": 0,
                    "to": 50,
                    "overlap": {"type": "none", "inFrames": 0, "outFrames": 0, "custom": "prompt_weight_1"},
                }],
                "commonPrompt": {"name": "Common", "allFrames": True},
                "commonPromptPos": "append",
            }
        },
    )

    format_version: Literal["v2"] = Field(
        default="v2",
        validation_alias=AliasChoices("formatVersion", "format", "format_version"),
        serialization_alias="formatVersion",
    )
    enabled: bool = True
    prompt_list: List[Prompt] = Field(default_factory=list, alias="promptList")
    common_prompt: Prompt = Field(
        default_factory=lambda: Prompt(name="Common", all_frames=True),
        alias="commonPrompt",
    )
    common_prompt_pos: CommonPromptPos = Field(default="append", alias="commonPromptPos")

    def to_dict(self) -> dict:
        """Serialise with the camelCase keys used by stored documents."""
        return self.model_dump(by_alias=True)


def interval_violations(prompt_set: PromptSet, last_frame: int) -> List[str]:
    """List every prompt whose interval breaks 0 <= from <= to <= last_frame."""
    problems = []
    for prompt in prompt_set.prompt_list:
        if prompt.from_ < 0:
            problems.append(f"{prompt.name}: from {prompt.from_} < 0")
        if prompt.from_ > prompt.to:
            problems.append(f"{prompt.name}: from {prompt.from_} > to {prompt.to}")
        if prompt.to > last_frame:
            problems.append(f"{prompt.name}: to {prompt.to} > last frame {last_frame}")
    return problems


class Severity(str, Enum):
    """Classification of an import diagnostic."""
    INFO = "info"
    ERROR = "error"


class ImportDiagnostic(BaseModel):
    """Result of parsing pasted text into candidate prompts."""
    model_config = ConfigDict(populate_by_name=True)

    parsed_prompts: List[Prompt] = Field(default_factory=list, alias="parsedPrompts")
    severity: Severity = Severity.INFO
    detail: str = ""

    @property
    def is_error(self) -> bool:
        return self.severity == Severity.ERROR


class Origin(str, Enum):
    """Where a committed prompt set came from."""
    INTERNAL = "internal"    # Produced by the edit reconciler itself
    EXTERNAL = "external"    # Document load, version revert, other editors


@dataclass(frozen=True)
class Commit:
    """A prompt set in transit between the edit reconciler and its owner.

    The origin travels beside the value so nothing in the prompt set itself
    ever needs tagging.
    """
    prompts: PromptSet
    origin: Origin = Origin.EXTERNAL


@dataclass(frozen=True)
class ComposabilityWarning:
    """A prompt that uses its own AND sections while overlapping others."""
    prompt_name: str
    overlapping: List[str] = field(default_factory=list)

    @property
    def message(self) -> str:
        names = ", ".join(self.overlapping)
        return (
            f"{self.prompt_name} overlaps with the following: {names}. "
            f"But {self.prompt_name} also appears to contain its own composable "
            f"diffusion sections (... AND ...). This may lead to unexpected results."
        )
