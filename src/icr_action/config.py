"""Configuration for the ICR vulnerability scan action."""

from __future__ import annotations

import datetime
import os
from pathlib import Path
from typing import Annotated, Any, Self

import yaml
from pydantic import BeforeValidator, Field, field_validator
from safir.pydantic import CamelCaseModel, HumanTimedelta


def _empty_str_is_none(inp: Any) -> Any:
    if isinstance(inp, str) and inp == "":
        return None
    return inp


def parse_bool_flag(value: str | None, *, default: bool = True) -> bool:
    """Interpret an action input such as ``FAIL_ON_VULNERABILITY``.

    Unset or empty means ``default``.  Otherwise only the exact string
    ``true`` is true, so ``TRUE`` or ``yes`` turn the flag off.
    """
    if not value:
        return default
    return value == "true"


class PolicyConfig(CamelCaseModel):
    """Policy deciding which scan statuses halt the pipeline."""

    fail_on_vulnerability: Annotated[
        bool,
        Field(
            title="Fail on vulnerability",
            description=(
                "If true, a FAIL status from the scanner fails the "
                "pipeline; otherwise it is reported as a warning."
            ),
        ),
    ] = True


class PollConfig(CamelCaseModel):
    """The polling budget.  Defaults give a five-minute ceiling."""

    max_attempts: Annotated[
        int,
        Field(
            title="Maximum attempts",
            description="Number of status queries before giving up.",
            ge=1,
            examples=[30],
        ),
    ] = 30

    interval: Annotated[
        HumanTimedelta,
        Field(
            title="Interval",
            description="Fixed wait between status queries.",
            examples=["10s"],
        ),
    ] = datetime.timedelta(seconds=10)

    command_timeout: Annotated[
        HumanTimedelta,
        Field(
            title="Command timeout",
            description=(
                "Longest a single ibmcloud invocation may run before it is "
                "abandoned and treated as unparseable output."
            ),
            examples=["1m"],
        ),
    ] = datetime.timedelta(seconds=60)

    @field_validator("interval")
    @classmethod
    def _validate_interval(
        cls, v: datetime.timedelta
    ) -> datetime.timedelta:
        if v < datetime.timedelta(0):
            raise ValueError("interval must not be negative")
        return v


class Config(CamelCaseModel):
    """Configuration for one scan run."""

    ibmcloud_path: Annotated[
        str,
        Field(
            title="ibmcloud path",
            description="Name or path of the ibmcloud executable.",
            examples=["ibmcloud"],
        ),
    ] = "ibmcloud"

    policy: Annotated[
        PolicyConfig,
        Field(
            default_factory=PolicyConfig,
            title="Policy",
            description="Failure policy.",
        ),
    ]

    poll: Annotated[
        PollConfig,
        Field(
            default_factory=PollConfig,
            title="Poll",
            description="Polling budget.",
        ),
    ]

    github_output: Annotated[
        Path | None,
        Field(
            BeforeValidator(_empty_str_is_none),
            title="GitHub output",
            description=(
                "File receiving step outputs; normally $GITHUB_OUTPUT."
            ),
        ),
    ] = None

    input_file: Annotated[
        Path | None,
        Field(
            BeforeValidator(_empty_str_is_none),
            title="Input file",
            description=(
                "If supplied, replay scan responses recorded in this file "
                "rather than calling ibmcloud."
            ),
        ),
    ] = None

    debug: Annotated[
        bool,
        Field(
            title="Debug",
            description="Much more verbose logging.",
        ),
    ] = False

    @classmethod
    def from_file(cls, path: Path) -> Self:
        return cls.model_validate(yaml.safe_load(path.read_text()) or {})

    def apply_environment(self) -> None:
        """Fill settings the Actions runner supplies through the
        environment, where the configuration leaves them unset.
        """
        if self.github_output is None:
            output = os.getenv("GITHUB_OUTPUT", "")
            if output:
                self.github_output = Path(output)
        if (
            "FAIL_ON_VULNERABILITY" in os.environ
            and "fail_on_vulnerability" not in self.policy.model_fields_set
        ):
            self.policy.fail_on_vulnerability = parse_bool_flag(
                os.environ["FAIL_ON_VULNERABILITY"]
            )
