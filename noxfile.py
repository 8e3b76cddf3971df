import nox

PYTHON_VERSIONS = ["3.10", "3.11", "3.12", "3.13"]


def _install(session: nox.Session, *extras: str) -> None:
    """Install the project with the given extras into the nox virtualenv."""
    session.install("-e", f".[{','.join(('test', *extras))}]")


@nox.session(python=PYTHON_VERSIONS)
def tests(session: nox.Session) -> None:
    """Run the suite on SQLite (thread-racing tests are skipped)."""
    _install(session)
    session.run("pytest", *session.posargs)


@nox.session(python=PYTHON_VERSIONS)
def tests_postgres(session: nox.Session) -> None:
    """
    Run the full suite on PostgreSQL, including the row-lock races.

    Connection comes from PGHOST / PGPORT / PGUSER / PGPASSWORD / PGDATABASE.
    """
    _install(session, "postgres")
    session.run(
        "pytest",
        *session.posargs,
        env={"ORDERLEDGER_TEST_DB": "postgresql"},
    )
