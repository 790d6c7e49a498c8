"""Output formatters for dedupe results."""

import json
import logging
from datetime import datetime, timezone
from typing import Collection, List
from uuid import uuid4

from packageurl import PackageURL
from cyclonedx.model.bom import Bom
from cyclonedx.model.component import Component, ComponentType, ComponentScope
from cyclonedx.output.json import JsonV1Dot6

from .models import Package
from .resolution import REPLACED, REDIRECTED, SKIPPED, ResolutionResult

logger = logging.getLogger(__name__)


class OutputFormatter:
    """Formatter for various output formats."""

    @staticmethod
    def format_as_list(packages: Collection[Package]) -> str:
        """Format packages as a flat list (one per line)."""
        lines = [pkg.full_name for pkg in packages]
        return '\n'.join(lines) + '\n'

    @staticmethod
    def format_as_report(result: ResolutionResult) -> str:
        """Format every decision followed by summary statistics."""
        lines = [f"Dedupe Report (criteria: {result.criteria.value}):", ""]

        width = max((len(d.package.full_name) for d in result.decisions), default=0)
        for decision in result.decisions:
            pkg = decision.package
            line = f"  {decision.action:<10}  {pkg.full_name:<{width}}  [{pkg.ref}]"
            if decision.action == REDIRECTED:
                line += f" -> {decision.target_ref}"
            elif decision.action == REPLACED:
                line += f" replaces {decision.replaced_ref}"
            elif decision.action == SKIPPED:
                line += " (not a semantic version)"
            lines.append(line)

        stats = result.stats()
        lines.extend([
            "",
            "Dedupe Statistics:",
            f"  Total Packages: {len(result.decisions)}",
            f"  Kept Packages: {stats['winners']}",
            f"  Duplicates Removed: {stats['losers']}",
            f"  Redirected: {stats[REDIRECTED]}",
            f"  Replaced: {stats[REPLACED]}",
            f"  Skipped: {stats[SKIPPED]}",
        ])

        return '\n'.join(lines) + '\n'

    @staticmethod
    def format_as_json(result: ResolutionResult) -> str:
        """Format decisions and the kept packages as JSON."""
        decisions = []
        for decision in result.decisions:
            entry = {
                'ref': decision.package.ref,
                'package': decision.package.full_name,
                'action': decision.action,
                'id': decision.target_ref,
            }
            if decision.replaced_ref is not None:
                entry['replacesId'] = decision.replaced_ref
            decisions.append(entry)

        output = {
            'criteria': result.criteria.value,
            'stats': result.stats(),
            'decisions': decisions,
            'packages': [pkg.full_name for pkg in result.winners],
        }
        return json.dumps(output, indent=2) + '\n'

    @staticmethod
    def format_as_sbom(result: ResolutionResult) -> str:
        """Generate a CycloneDX SBOM in JSON format, duplicates marked as excluded."""
        from . import __version__

        bom = Bom()
        bom.serial_number = uuid4()

        tool_purl_str = f"pkg:pypi/depdedupe@{__version__}"
        tool_component = Component(
            name="depdedupe",
            version=__version__,
            type=ComponentType.APPLICATION,
            purl=PackageURL.from_string(tool_purl_str),
            bom_ref=tool_purl_str,
        )
        bom.metadata.tools.components.add(tool_component)
        bom.metadata.timestamp = datetime.now(timezone.utc).replace(microsecond=0)

        for pkg in result.winners + result.losers:
            bom.components.add(OutputFormatter._package_to_component(pkg))

        outputter = JsonV1Dot6(bom)
        return outputter.output_as_string(indent=2) + '\n'

    @staticmethod
    def _package_to_component(pkg: Package) -> Component:
        """Convert a Package to a CycloneDX Component."""
        # For Maven packages, separate group and artifact
        name = pkg.name
        group = None
        if pkg.system == 'maven' and ':' in pkg.name:
            group, name = pkg.name.split(':', 1)

        # Build tags list to indicate scope reason and winning version
        tags: List[str] = []
        if pkg.scope_reason:
            tags.append(f"scope:{pkg.scope_reason}")
        if pkg.winning_version:
            tags.append(f"winner:{pkg.winning_version}")
        for defeated in pkg.defeated_versions:
            tags.append(f"defeated:{defeated}")

        component = Component(
            name=name,
            version=pkg.version,
            type=ComponentType.LIBRARY,
            group=group,
            purl=PackageURL.from_string(pkg.purl),
            bom_ref=pkg.ref,
            tags=tags if tags else None
        )
        component.scope = ComponentScope.EXCLUDED if pkg.scope == 'excluded' else ComponentScope.REQUIRED

        return component
