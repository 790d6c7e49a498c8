"""Input file parsers for package lists."""

import json
import logging
import os
from pathlib import Path
from typing import List, Optional
from urllib.parse import urlparse

import requests
from packageurl import PackageURL

from .models import Package

logger = logging.getLogger(__name__)


def _is_url(path: str) -> bool:
    """Check if a path is a URL."""
    try:
        result = urlparse(path)
    except ValueError:
        return False
    return result.scheme in ('http', 'https')


def _read_content(path: str) -> str:
    """
    Read content from either a file path or URL.

    Args:
        path: File path or URL

    Returns:
        Content as string

    Raises:
        FileNotFoundError: If file doesn't exist
        requests.RequestException: If URL fetch fails
    """
    if _is_url(path):
        logger.info(f"Fetching content from URL: {path}")
        response = requests.get(path, timeout=30)
        response.raise_for_status()
        return response.text
    else:
        logger.info(f"Reading content from file: {path}")
        with open(path, 'r') as f:
            return f.read()


def _source_label(path: str) -> str:
    if _is_url(path):
        return os.path.basename(urlparse(path).path) or path
    return os.path.basename(path)


class FileParser:
    """Parser for various input file formats."""

    @staticmethod
    def parse_flat_file(file_path: str) -> List[Package]:
        """
        Parse a flat file with system:name:version (or a purl) per line.
        Supports both local files and URLs.

        Example:
            maven:org.springframework.boot:spring-boot-starter-web:3.1.0
            npm:react:18.2.0
            pkg:npm/lodash@4.17.21
        """
        packages = []
        content = _read_content(file_path)
        label = _source_label(file_path)

        for line_num, line in enumerate(content.splitlines(), 1):
            line = line.strip()

            # Skip empty lines and comments
            if not line or line.startswith('#'):
                continue

            ref = f"{label}:{line_num}"

            if line.startswith('pkg:'):
                pkg = FileParser._parse_purl(line, ref)
                if pkg:
                    packages.append(pkg)
                continue

            parts = line.split(':')
            if len(parts) < 3:
                logger.debug(f"Line {line_num}: Skipping non-dependency line '{line}'")
                continue

            system = parts[0]
            # Handle maven groupId:artifactId format with system prefix
            if system.lower() == 'maven' and len(parts) >= 4:
                name = f"{parts[1]}:{parts[2]}"
                version = parts[3]
            else:
                name = parts[1]
                version = ':'.join(parts[2:])  # Handle versions with colons

            if not name or not version:
                logger.debug(f"Line {line_num}: Skipping line without name or version '{line}'")
                continue

            packages.append(Package(system=system, name=name, version=version, ref=ref))

        logger.info(f"Parsed {len(packages)} packages from flat file")
        return packages

    @staticmethod
    def parse_sbom_file(file_path: str) -> List[Package]:
        """Parse a CycloneDX SBOM JSON file. Supports both local files and URLs."""
        content = _read_content(file_path)
        sbom = json.loads(content)

        packages = []
        seen_refs = set()
        components = sbom.get('components', [])
        declared_refs = {c.get('bom-ref') for c in components if c.get('bom-ref')}

        for index, component in enumerate(components):
            purl = component.get('purl')
            if not purl:
                continue

            ref = component.get('bom-ref') or purl
            if ref in seen_refs:
                # Generated refs must not clash with any real bom-ref, earlier or later
                suffix = index
                candidate = f"{ref}#{suffix}"
                while candidate in seen_refs or candidate in declared_refs:
                    suffix += 1
                    candidate = f"{ref}#{suffix}"
                ref = candidate
            seen_refs.add(ref)

            pkg = FileParser._parse_purl(purl, ref)
            if pkg:
                packages.append(pkg)

        logger.info(f"Parsed {len(packages)} packages from SBOM")
        return packages

    @staticmethod
    def _parse_purl(purl: str, ref: Optional[str] = None) -> Optional[Package]:
        """Parse a Package URL (purl) string."""
        try:
            parsed = PackageURL.from_string(purl)
        except ValueError as e:
            logger.warning(f"Invalid purl format: {purl} ({e})")
            return None

        if not parsed.version:
            logger.warning(f"Purl has no version: {purl}")
            return None

        if parsed.namespace:
            # Maven uses groupId:artifactId, every other type keeps namespace/name
            separator = ':' if parsed.type == 'maven' else '/'
            name = f"{parsed.namespace}{separator}{parsed.name}"
        else:
            name = parsed.name

        return Package(system=parsed.type, name=name, version=parsed.version, ref=ref)

    @staticmethod
    def detect_format(file_path: str) -> str:
        """Detect the input file format based on file extension."""
        name_lower = Path(urlparse(file_path).path if _is_url(file_path) else file_path).name.lower()

        if (name_lower.endswith('.sbom') or name_lower.endswith('.cdx.json') or
                (name_lower.endswith('.json') and any(x in name_lower for x in ['sbom', 'bom', 'cdx']))):
            return 'sbom'
        else:
            return 'flat'

    @staticmethod
    def parse(file_path: str, input_format: str = 'auto') -> List[Package]:
        """Parse a file in the given format, detecting it from the name when 'auto'."""
        if input_format == 'auto':
            input_format = FileParser.detect_format(file_path)
            logger.info(f"Detected input format: {input_format}")

        if input_format == 'sbom':
            return FileParser.parse_sbom_file(file_path)
        if input_format == 'flat':
            return FileParser.parse_flat_file(file_path)
        raise ValueError(f"Unknown input format: {input_format}")
