"""
Exception classes with built-in guidance for jargo builds.
"""
from typing import List, Optional


class JargoException(Exception):
    """Base exception for all jargo errors."""
    def __init__(self, message: str, field: str = None):
        super().__init__(message)
        self.field = field
        self.guidance = self._generate_guidance()

    def _generate_guidance(self):
        """Override in subclasses to provide specific guidance."""
        return "💡 Check your project and try again"


class DescriptorError(JargoException):
    """Raised when the build descriptor is invalid."""
    def _generate_guidance(self):
        return "💡 Fix the descriptor (jargo.yaml or Jargo.toml) and run the build again"


class DescriptorNotFoundError(DescriptorError):
    """Raised when no descriptor exists in the project directory."""
    def _generate_guidance(self):
        return """💡 Run the build from a jargo project, or create one:
   jargo new my-project"""


class DescriptorSyntaxError(DescriptorError):
    """Raised when the descriptor text cannot be parsed."""
    pass


class MissingEntryPointError(DescriptorError):
    """Raised when application.mainEntryPoint is missing or not a fully-qualified name."""
    def __init__(self, message: str):
        super().__init__(message, field="application.mainEntryPoint")

    def _generate_guidance(self):
        return """💡 Declare the class holding main() with its package:
   application:
     mainEntryPoint: com.example.Main"""


class MalformedDependencyError(DescriptorError):
    """Raised when a dependency coordinate is not group:artifact:version."""
    def __init__(self, message: str, coordinate: str = None):
        self.coordinate = coordinate
        super().__init__(message, field="dependencies")

    def _generate_guidance(self):
        return """💡 Dependencies use Maven coordinates with all three segments:
   - coordinate: com.google.code.gson:gson:2.10.1"""


class DuplicateDependencyError(DescriptorError):
    """Raised when the same group:artifact is declared more than once."""
    def __init__(self, message: str, key: str = None):
        self.key = key
        super().__init__(message, field="dependencies")

    def _generate_guidance(self):
        return f"💡 Keep a single entry for '{self.key}' and pick one version"


class IncompletePackagingConfigError(DescriptorError):
    """Raised when shaded-packaging is enabled without its parameters."""
    def __init__(self, message: str, missing: List[str] = None):
        self.missing = missing or []
        super().__init__(message, field="packaging")

    def _generate_guidance(self):
        return f"""💡 shaded-packaging needs {', '.join(self.missing) or 'baseName and version'}:
   packaging:
     baseName: my-app
     classifier: ""
     version: 0.1.0"""


class UnknownCapabilityError(DescriptorError):
    """Raised when a capability name is not recognized."""
    def __init__(self, message: str):
        super().__init__(message, field="capabilities")

    def _generate_guidance(self):
        return "💡 Known capabilities: compile, application, shaded-packaging"


class UnknownRepositoryError(DescriptorError):
    """Raised when a repository is neither a known name nor a URL."""
    def __init__(self, message: str):
        super().__init__(message, field="repositories")

    def _generate_guidance(self):
        return "💡 Use 'central', 'google', or an http(s):// or file:// URL"


class DependencyResolutionError(JargoException):
    """Raised when a dependency cannot be located in any repository."""
    def __init__(self, message: str, coordinate: str = None, tried: Optional[List[str]] = None):
        self.coordinate = coordinate
        self.tried = tried or []
        super().__init__(message)

    def _generate_guidance(self):
        tried = '\n'.join(f"   - {url}" for url in self.tried) or "   (none)"
        return f"""💡 Check the coordinate '{self.coordinate}' and your network connection.
   Repositories tried:
{tried}"""


class CompilationError(JargoException):
    """Raised when Java compilation fails."""
    def __init__(self, message: str, output: str = ""):
        self.output = output
        super().__init__(message)

    def _generate_guidance(self):
        if self.output:
            return f"{self.output.rstrip()}\n💡 Fix the compiler errors above and build again"
        return "💡 Make sure a JDK is installed and JAVA_HOME points to it"


class PackagingError(JargoException):
    """Raised when the shaded archive cannot be assembled."""
    pass


class ProjectExistsError(JargoException):
    """Raised when scaffolding into a directory that already has content."""
    def _generate_guidance(self):
        return "💡 Pick a new directory name or empty the existing one"
