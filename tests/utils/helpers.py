"""
Test Helpers
============

Helper functions for building icon trees and catalog URLs.
"""

from pathlib import Path
from typing import Iterable, List
from urllib.parse import quote

ICONS_BASE_URL = "https://icons.terrastruct.com"

SVG_STUB = '<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 1 1"/>\n'

# Subset of the real catalog layout, including its awkward directory names
SAMPLE_ICON_PATHS: List[str] = [
    "aws/Compute/AWS-Lambda.svg",
    "aws/Compute/Amazon-EC2.svg",
    "aws/Compute/Amazon-Elastic-Container-Service.svg",
    "aws/Networking & Content Delivery/Amazon-CloudFront.svg",
    "aws/Networking & Content Delivery/Amazon-Route-53.svg",
    "aws/Networking & Content Delivery/Amazon-API-Gateway.svg",
    "aws/Networking & Content Delivery/Elastic-Load-Balancing.svg",
    "aws/Security, Identity, & Compliance/AWS-WAF.svg",
    "aws/Security, Identity, & Compliance/AWS-Key-Management-Service.svg",
    "aws/Security, Identity, & Compliance/AWS-Secrets-Manager.svg",
    "aws/Storage/Amazon-Simple-Storage-Service-S3.svg",
    "aws/Database/Amazon-DynamoDB.svg",
    "aws/Database/Amazon-ElastiCache.svg",
    "aws/Database/Amazon-Aurora.svg",
    "aws/Application Integration/Amazon-Simple-Queue-Service-SQS.svg",
    "aws/Application Integration/Amazon-Simple-Notification-Service-SNS.svg",
    "aws/Application Integration/AWS-AppSync.svg",
    "aws/Analytics/Amazon-Kinesis.svg",
    "aws/Analytics/Amazon-Elasticsearch-Service.svg",
    "aws/Analytics/Amazon-Redshift.svg",
    "aws/Analytics/Amazon-Athena.svg",
    "aws/Management & Governance/Amazon-CloudWatch.svg",
    "aws/Developer Tools/AWS-X-Ray.svg",
    "aws/Internet of Things/AWS-IoT-Core.svg",
    "essentials/359-users.svg",
    "dev/firebase.svg",
    "dev/apple.svg",
]


def build_icon_tree(root: Path, relative_paths: Iterable[str]) -> Path:
    """Create stub SVG files under ``root`` and return ``root``."""
    for relative in relative_paths:
        target = root / relative
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(SVG_STUB, encoding="utf-8")
    return root


def make_icon_url(path: str, encode_slashes: bool = True, base_url: str = ICONS_BASE_URL) -> str:
    """Build a catalog URL the way clients usually write it."""
    safe = "" if encode_slashes else "/"
    return f"{base_url}/{quote(path, safe=safe)}"


def asset_path(root: Path, relative: str) -> str:
    """Absolute path the index reports for ``relative`` under ``root``."""
    return str(root.absolute() / relative)
