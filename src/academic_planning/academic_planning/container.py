from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .activities.mysql_activity_repository import MySQLActivityRepository
from .activities.repository import ActivityRepository
from .activities.service import ActivityService
from .auth.settings import AuthSettings
from .auth.tokens import SessionTokenIssuer
from .core.constants import EXPORT_VERSION
from .database.connection import DBConfig, DatabaseConnection
from .exports.importer import ProgramImportService
from .exports.service import DataExportService
from .indicators.mysql_indicator_repository import MySQLIndicatorRepository
from .indicators.repository import IndicatorRepository
from .indicators.service import IndicatorService
from .periods.mysql_period_repository import MySQLPeriodRepository
from .periods.repository import PeriodRepository
from .periods.service import PeriodService
from .programs.mysql_program_repository import MySQLProgramRepository
from .programs.repository import ProgramRepository
from .programs.service import ProgramService
from .results.mysql_result_repository import MySQLResultRepository
from .results.repository import ResultRepository
from .results.service import ResultService
from .users.mysql_user_repository import MySQLPreferencesRepository, MySQLUserRepository
from .users.repository import PreferencesRepository, UserRepository
from .users.service import AuthService, PreferenceService, ProfileService


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    users_repo: UserRepository
    preferences_repo: PreferencesRepository
    periods_repo: PeriodRepository
    programs_repo: ProgramRepository
    activities_repo: ActivityRepository
    indicators_repo: IndicatorRepository
    results_repo: ResultRepository

    token_issuer: SessionTokenIssuer
    auth_service: AuthService
    preference_service: PreferenceService
    profile_service: ProfileService
    period_service: PeriodService
    program_service: ProgramService
    activity_service: ActivityService
    indicator_service: IndicatorService
    result_service: ResultService
    export_service: DataExportService
    import_service: ProgramImportService


def wire_container(
    *,
    users_repo: UserRepository,
    preferences_repo: PreferencesRepository,
    periods_repo: PeriodRepository,
    programs_repo: ProgramRepository,
    activities_repo: ActivityRepository,
    indicators_repo: IndicatorRepository,
    results_repo: ResultRepository,
    auth_settings: AuthSettings,
    export_version: str = EXPORT_VERSION,
    conn: Optional[DatabaseConnection] = None,
) -> Container:
    """Build every service on top of the given repositories."""
    return Container(
        conn=conn,
        users_repo=users_repo,
        preferences_repo=preferences_repo,
        periods_repo=periods_repo,
        programs_repo=programs_repo,
        activities_repo=activities_repo,
        indicators_repo=indicators_repo,
        results_repo=results_repo,
        token_issuer=SessionTokenIssuer(auth_settings),
        auth_service=AuthService(users_repo),
        preference_service=PreferenceService(preferences_repo),
        profile_service=ProfileService(users_repo),
        period_service=PeriodService(periods_repo, activities_repo, indicators_repo),
        program_service=ProgramService(programs_repo),
        activity_service=ActivityService(activities_repo, programs_repo, periods_repo),
        indicator_service=IndicatorService(indicators_repo, programs_repo, periods_repo, users_repo),
        result_service=ResultService(results_repo, programs_repo),
        export_service=DataExportService(users_repo, programs_repo, version=export_version),
        import_service=ProgramImportService(programs_repo),
    )


def build_container(*, db_config: dict, auth_settings: AuthSettings, export_version: str = EXPORT_VERSION) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_mapping(db_config))

    return wire_container(
        users_repo=MySQLUserRepository(conn),
        preferences_repo=MySQLPreferencesRepository(conn),
        periods_repo=MySQLPeriodRepository(conn),
        programs_repo=MySQLProgramRepository(conn),
        activities_repo=MySQLActivityRepository(conn),
        indicators_repo=MySQLIndicatorRepository(conn),
        results_repo=MySQLResultRepository(conn),
        auth_settings=auth_settings,
        export_version=export_version,
        conn=conn,
    )
