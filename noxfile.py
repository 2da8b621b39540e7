import nox

PYTHON_VERSIONS = ["3.11", "3.12", "3.13", "3.14"]


def _install(session: nox.Session) -> None:
    """Install the storefront with its test extra into the nox virtualenv."""
    session.run("poetry", "install", "--extras", "test", external=True)


@nox.session(python=PYTHON_VERSIONS)
def tests(session: nox.Session) -> None:
    """Run full test suite across Python versions."""
    _install(session)
    session.run("pytest", *session.posargs)


@nox.session(python=PYTHON_VERSIONS)
def tests_domain(session: nox.Session) -> None:
    """Run aggregate and value object tests only (no HTTP layer)."""
    _install(session)
    session.run("pytest", "-m", "domain")


@nox.session(python=PYTHON_VERSIONS[-1])
def tests_api(session: nox.Session) -> None:
    """Run the HTTP API and Gherkin scenarios against the latest Python."""
    _install(session)
    session.run("pytest", "-m", "integration or bdd")
