# docker_binary_installer/urls.py
# -*- coding: utf-8 -*-
"""
Release URL resolution for the Docker static binary tarballs.
"""

from typing import Dict

from docker_binary_installer.config_models import Mirror

DOWNLOAD_URL_TEMPLATES: Dict[Mirror, str] = {
    Mirror.REGIONAL: "https://mirrors.tuna.tsinghua.edu.cn/docker-ce/linux/static/stable/{arch}/docker-{version}.tgz",
    Mirror.DEFAULT: "https://download.docker.com/linux/static/stable/{arch}/docker-{version}.tgz",
}


def archive_filename(version: str) -> str:
    """Name of the cached release archive for a version."""
    return f"docker-{version}.tgz"


def resolve_download_url(mirror: Mirror, arch: str, version: str) -> str:
    """
    Build the tarball URL for a mirror, architecture and version.

    Architecture and version are substituted verbatim; the URL is not checked
    for reachability.
    """
    return DOWNLOAD_URL_TEMPLATES[Mirror(mirror)].format(arch=arch, version=version)
