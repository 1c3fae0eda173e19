"""Common configuration types.

This module defines the enums shared across configuration models and the
framework alias table used when normalising legacy values.
"""

from enum import StrEnum


class Framework(StrEnum):
    """Frameworks generators can target."""

    NEXTJS = "nextjs"
    REACT = "react"
    VUE = "vue"
    NUXT = "nuxt"
    ANGULAR = "angular"
    SVELTE = "svelte"
    SVELTEKIT = "sveltekit"
    REMIX = "remix"
    SOLID = "solid"
    EXPRESS = "express"
    NESTJS = "nestjs"
    FASTIFY = "fastify"
    HONO = "hono"


class PackageManager(StrEnum):
    """JavaScript package managers."""

    NPM = "npm"
    YARN = "yarn"
    PNPM = "pnpm"
    BUN = "bun"


class MonorepoTool(StrEnum):
    """Monorepo orchestration tools."""

    NX = "nx"
    TURBO = "turbo"
    LERNA = "lerna"
    WORKSPACES = "workspaces"


class Classification(StrEnum):
    """NSM security classification levels, least to most restricted."""

    OPEN = "OPEN"
    RESTRICTED = "RESTRICTED"
    CONFIDENTIAL = "CONFIDENTIAL"
    SECRET = "SECRET"


class LogLevel(StrEnum):
    """Log level threshold values.

    Values are ordered from most verbose (debug) to least verbose (error).
    """

    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class LogFormat(StrEnum):
    """Log output format values."""

    JSON = "json"
    TEXT = "text"


class ConfigOrigin(StrEnum):
    """Where a loaded configuration came from, in decision-chain order."""

    UNIFIED = "unified"
    XAHEEN_LEGACY = "xaheen-legacy"
    XALA = "xala"
    DEFAULTS = "defaults"


# Spellings seen in legacy configs and package names
FRAMEWORK_ALIASES: dict[str, Framework] = {
    "next": Framework.NEXTJS,
    "next.js": Framework.NEXTJS,
    "nextjs": Framework.NEXTJS,
    "react": Framework.REACT,
    "reactjs": Framework.REACT,
    "vue": Framework.VUE,
    "vue3": Framework.VUE,
    "vuejs": Framework.VUE,
    "nuxt": Framework.NUXT,
    "nuxt3": Framework.NUXT,
    "nuxtjs": Framework.NUXT,
    "angular": Framework.ANGULAR,
    "svelte": Framework.SVELTE,
    "sveltekit": Framework.SVELTEKIT,
    "svelte-kit": Framework.SVELTEKIT,
    "remix": Framework.REMIX,
    "solid": Framework.SOLID,
    "solidjs": Framework.SOLID,
    "solid-js": Framework.SOLID,
    "express": Framework.EXPRESS,
    "nest": Framework.NESTJS,
    "nestjs": Framework.NESTJS,
    "fastify": Framework.FASTIFY,
    "hono": Framework.HONO,
}


def normalize_framework(value: object) -> object:
    """Map a framework alias to its ``Framework``; other values pass through."""
    if isinstance(value, str):
        return FRAMEWORK_ALIASES.get(value.strip().lower(), value)
    return value
