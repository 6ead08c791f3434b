"""
adept package specifiers and repository indexes.

Maven-style repositories (maven.google.com layout) publish:
- a master index listing one empty element per group id:
      <metadata><androidx.core/><com.google.android.material/></metadata>
- a group index per group, at <group path>/group-index.xml, listing artifacts
  and their versions:
      <com.google.android.material>
        <material versions="1.3.0,1.4.0"/>
      </com.google.android.material>
- for every artifact version, a POM and the artifact file itself:
      <group path>/<artifact>/<version>/<artifact>-<version>.pom

Packages are requested as "<name>:<version>", where name is either a group id
whose last segment is the artifact ("com.google.android.material") or a group
id followed by the artifact ("androidx.core.core").
"""
import re
import xml.etree.ElementTree as xml
from typing import NamedTuple

from .faults import InvalidPackageSpecError, PackageNotFoundError, MalformedIndexError

PACKAGE_FORMAT = "expected format: <package path>:<package version>, ie com.google.android.material:1.4.0"

_SPEC_RE = re.compile(r"(?P<name>[^\s:]+):(?P<version>[^\s:]+)")


class PackageSpec(NamedTuple):
    """A requested package: name and version, as typed on the command line."""
    name: str
    version: str

    def __str__(self):
        return "%s:%s" % self


class Package(NamedTuple):
    """A package located in the repository (group id, artifact id, version)."""
    group: str
    artifact: str
    version: str

    @property
    def path(self):
        """Repository-relative directory of this version."""
        return "/".join((self.group.replace(".", "/"), self.artifact, self.version))

    @property
    def stem(self):
        """File name stem shared by the POM and the artifact file."""
        return "%s-%s" % (self.artifact, self.version)

    def __str__(self):
        return "%s:%s:%s" % self


def parse_spec(token, /):
    """
    Split a "<name>:<version>" token.

    Raises
    - InvalidPackageSpecError: token is not exactly one non-empty name and one
      non-empty version around a single colon.
    """
    if not isinstance(token, str):
        raise TypeError("parse_spec() argument must be a string")
    if not (match := _SPEC_RE.fullmatch(token)):
        raise InvalidPackageSpecError(
            "invalid package name: %r" % token,
            title="invalid package",
            hint=PACKAGE_FORMAT,
            token=token,
        )
    return PackageSpec(match["name"], match["version"])


def _parse(body, what):
    """Internal: parse an XML document, reporting malformed input as a fault."""
    try:
        return xml.fromstring(body)
    except xml.ParseError as error:
        raise MalformedIndexError(
            "could not read the %s: %s" % (what, error),
            title="malformed index",
            hint="make sure the repository serves a %s at this address" % what,
        ) from None


def _localname(tag):
    """Strip an XML namespace ("{ns}tag" → "tag")."""
    return tag.rpartition("}")[2]


def group_path(group, /):
    """Repository-relative directory of a group id."""
    return group.replace(".", "/")


class MasterIndex:
    """Set of group ids published by a repository."""

    def __init__(self, groups=()):
        self._groups = frozenset(groups)

    @classmethod
    def parse(cls, body, /):
        return cls(_localname(child.tag) for child in _parse(body, "master index"))

    @property
    def groups(self):
        return self._groups

    def __contains__(self, group):
        return group in self._groups

    def __len__(self):
        return len(self._groups)

    def locate(self, spec, /):
        """
        Resolve a package spec to (group, artifact).

        Raises
        - PackageNotFoundError: neither the name nor its parent is a known group.
        """
        if spec.name in self._groups:
            return spec.name, spec.name.rpartition(".")[2]
        group, _, artifact = spec.name.rpartition(".")
        if group in self._groups:
            return group, artifact
        raise PackageNotFoundError(
            "package %r is not listed in the master index" % spec.name,
            title="package not found",
            hint="check the package name, or point --repo/--index at another repository",
            spec=spec,
        )


class GroupIndex:
    """Artifacts of one group and their published versions."""

    def __init__(self, group, artifacts):
        self._group = group
        self._artifacts = {name: tuple(versions) for name, versions in artifacts.items()}

    @classmethod
    def parse(cls, body, /):
        root = _parse(body, "group index")
        artifacts = {}
        for child in root:
            versions = child.get("versions", "")
            artifacts[_localname(child.tag)] = tuple(version.strip() for version in versions.split(",") if version.strip())
        return cls(_localname(root.tag), artifacts)

    @property
    def group(self):
        return self._group

    @property
    def artifacts(self):
        return dict(self._artifacts)

    def versions(self, artifact, /):
        return self._artifacts.get(artifact, ())

    def resolve(self, artifact, version, /):
        """
        Return the Package for artifact/version.

        Raises
        - PackageNotFoundError: the artifact or the version is not published.
        """
        if artifact not in self._artifacts:
            raise PackageNotFoundError(
                "artifact %r is not published in group %r" % (artifact, self._group),
                title="package not found",
                hint="available artifacts: %s" % (", ".join(sorted(self._artifacts)) or "none"),
            )
        if version not in self._artifacts[artifact]:
            raise PackageNotFoundError(
                "version %r of %s:%s is not published" % (version, self._group, artifact),
                title="package not found",
                hint="available versions: %s" % (", ".join(self._artifacts[artifact]) or "none"),
            )
        return Package(self._group, artifact, version)


def packaging(body, /):
    """
    Artifact file extension declared by a POM (<packaging>, "jar" when absent).

    "bundle" packaging ships a plain jar.
    """
    root = _parse(body, "package descriptor")
    for element in root:
        if _localname(element.tag) == "packaging" and (element.text or "").strip():
            kind = element.text.strip()
            return "jar" if kind == "bundle" else kind
    return "jar"


__all__ = (
    "PACKAGE_FORMAT",
    "PackageSpec",
    "Package",
    "parse_spec",
    "group_path",
    "MasterIndex",
    "GroupIndex",
    "packaging",
)
