"""
Crisis Resources

Jurisdiction-aware crisis resource resolver.
Resources are configurable; the built-in table is a fallback.

LEGAL_REVIEW_REQUIRED: Crisis resource information must be verified
for accuracy in each jurisdiction.
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Union

from companion.config.logging_config import get_logger
from companion.domain.models.safety import CrisisResource

logger = get_logger(__name__)


@dataclass(frozen=True)
class JurisdictionResources:
    """
    Crisis resources for a specific jurisdiction.

    Attributes:
        country_code: ISO country code
        country_name: Human-readable country name
        emergency_number: General emergency number (e.g., 911)
        resources: Crisis resources in priority order
    """

    country_code: str
    country_name: str
    emergency_number: str = ""
    resources: tuple[CrisisResource, ...] = field(default_factory=tuple)

    def around_the_clock(self) -> tuple[CrisisResource, ...]:
        """Resources available 24/7."""
        return tuple(r for r in self.resources if r.available_24_7)

    def format_all_resources(self) -> str:
        """Format all resources for display."""
        lines = [f"**Crisis Resources ({self.country_name})**\n"]

        if self.emergency_number:
            lines.append(f"• **Emergency**: {self.emergency_number}\n")

        for resource in self.resources:
            lines.append(resource.format_for_user())

        return "\n".join(lines)


class CrisisResourceResolver:
    """
    Jurisdiction-aware crisis resource resolver.

    Usage:
        resolver = CrisisResourceResolver()
        resources = resolver.crisis_resources("US")
    """

    # Fallback when jurisdiction unknown
    DEFAULT_RESOURCES: JurisdictionResources = JurisdictionResources(
        country_code="INTL",
        country_name="International",
        resources=(
            CrisisResource(
                name="International Association for Suicide Prevention",
                resource_type="website",
                contact="https://www.iasp.info/resources/Crisis_Centres/",
                description="Directory of crisis centers worldwide",
                available_24_7=True,
            ),
            CrisisResource(
                name="Befrienders Worldwide",
                resource_type="website",
                contact="https://www.befrienders.org/",
                description="Emotional support centers globally",
                available_24_7=True,
            ),
        ),
    )

    # LEGAL_REVIEW_REQUIRED: Verify all numbers before production
    BUILT_IN_RESOURCES: dict[str, JurisdictionResources] = {
        "US": JurisdictionResources(
            country_code="US",
            country_name="United States",
            emergency_number="911",
            resources=(
                CrisisResource(
                    name="988 Suicide & Crisis Lifeline",
                    resource_type="hotline",
                    contact="Call or text 988",
                    description="National suicide prevention lifeline",
                    available_24_7=True,
                    languages=("en", "es"),
                ),
                CrisisResource(
                    name="Crisis Text Line",
                    resource_type="text",
                    contact="Text HOME to 741741",
                    description="Text-based crisis support",
                    available_24_7=True,
                ),
            ),
        ),
        "GB": JurisdictionResources(
            country_code="GB",
            country_name="United Kingdom",
            emergency_number="999",
            resources=(
                CrisisResource(
                    name="Samaritans",
                    resource_type="hotline",
                    contact="116 123",
                    description="Emotional support for anyone in distress",
                    available_24_7=True,
                ),
                CrisisResource(
                    name="SHOUT",
                    resource_type="text",
                    contact="Text SHOUT to 85258",
                    description="Text-based mental health support",
                    available_24_7=True,
                ),
            ),
        ),
    }

    def __init__(
        self,
        config_path: Optional[Union[str, Path]] = None,
    ) -> None:
        """
        Initialize resolver.

        Args:
            config_path: Optional JSON file adding or replacing jurisdictions

        Raises:
            OSError, ValueError: If the config file cannot be loaded
        """
        self._resources = dict(self.BUILT_IN_RESOURCES)

        if config_path:
            self._load_config(config_path)

    def _load_config(self, config_path: Union[str, Path]) -> None:
        """Load resources from JSON config file."""
        with open(config_path, "r", encoding="utf-8") as f:
            data = json.load(f)

        for country_code, country_data in data.items():
            resources = tuple(
                CrisisResource(
                    name=r["name"],
                    resource_type=r.get("resource_type", "hotline"),
                    contact=r["contact"],
                    description=r.get("description", ""),
                    available_24_7=r.get("available_24_7", True),
                    languages=tuple(r.get("languages", ["en"])),
                )
                for r in country_data.get("resources", [])
            )
            self._resources[country_code.upper()] = JurisdictionResources(
                country_code=country_code.upper(),
                country_name=country_data.get("country_name", country_code),
                emergency_number=country_data.get("emergency_number", ""),
                resources=resources,
            )

        logger.info(
            "Loaded crisis resources config",
            path=str(config_path),
            jurisdiction_count=len(data),
        )

    def get_resources(self, country_code: str) -> JurisdictionResources:
        """
        Get resources for a jurisdiction.

        Args:
            country_code: ISO country code (e.g., "US", "GB")

        Returns:
            JurisdictionResources for the location, or the
            international defaults
        """
        resources = self._resources.get(country_code.upper())
        if resources is not None:
            return resources

        logger.warning(
            "No resources for jurisdiction, using default",
            country_code=country_code,
        )
        return self.DEFAULT_RESOURCES

    def crisis_resources(self, country_code: str) -> tuple[CrisisResource, ...]:
        """
        24/7 resources to surface in a safety response.

        Falls back to the international defaults when the jurisdiction
        has no around-the-clock resources.
        """
        resources = self.get_resources(country_code).around_the_clock()
        return resources or self.DEFAULT_RESOURCES.around_the_clock()
