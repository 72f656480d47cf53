"""
Shared SparkSession utilities for the household examples.

Every example script builds its session through create_spark_session()
so that the application name, local master and logging setup stay the same.

Logging is configured via conf/log4j2.properties to:
- Write INFO logs to .logs/spark.log
- Only show ERROR on console (keeping the example output readable)
"""

import os
from pathlib import Path

from pyspark.sql import SparkSession

# Project root directory
PROJECT_ROOT = Path(__file__).parent.parent.parent

# Path to log4j2 config
LOG4J2_CONFIG = PROJECT_ROOT / "conf" / "log4j2.properties"

# Final app name will be: APP_NAME_PREFIX-<ScriptName>
APP_NAME_PREFIX = "NestedRecords"

# Small local defaults; the household datasets fit in a handful of partitions
DEFAULT_SHUFFLE_PARTITIONS = 4
DEFAULT_DRIVER_MEMORY = "2g"


def _ensure_logs_dir() -> None:
    """Ensure .logs directory exists."""
    (PROJECT_ROOT / ".logs").mkdir(exist_ok=True)


def build_app_name(script_id: str | None = None) -> str:
    """
    Build the Spark application name for a script.

    A file path (e.g. __file__) is reduced to its stem and converted from
    snake_case to TitleCase; any other string is used as-is.

    Examples:
        None                              -> NestedRecords
        ".../examples/household_costs.py" -> NestedRecords-HouseholdCosts
        "Scratch"                         -> NestedRecords-Scratch
    """
    if not script_id:
        return APP_NAME_PREFIX

    if "/" in script_id or script_id.endswith(".py"):
        stem = Path(script_id).stem
        script_id = "".join(word.capitalize() for word in stem.split("_"))

    return f"{APP_NAME_PREFIX}-{script_id}"


def create_spark_session(
    script_name: str | None = None,
    master: str = "local[*]",
    shuffle_partitions: int = DEFAULT_SHUFFLE_PARTITIONS,
) -> SparkSession:
    """
    Create a SparkSession with the project's common configuration.

    Args:
        script_name: Identifier for this script, either __file__ or a plain
                     name. See build_app_name().
        master: Spark master URL (default: local[*] for local development)
        shuffle_partitions: Value for spark.sql.shuffle.partitions. The
                            groupBy in nest_households() shuffles, so keeping
                            this small avoids hundreds of empty tasks.

    Returns:
        Configured SparkSession instance

    Examples:
        spark = create_spark_session(__file__)
        spark = create_spark_session("Scratch", master="local[2]")
    """
    _ensure_logs_dir()

    app_name = build_app_name(script_name)

    # log4j resolves the relative .logs/ path against the working directory
    original_cwd = os.getcwd()
    os.chdir(PROJECT_ROOT)

    try:
        builder = SparkSession.builder.appName(app_name).master(master)

        if LOG4J2_CONFIG.exists():
            builder = builder.config(
                "spark.driver.extraJavaOptions",
                f"-Dlog4j.configurationFile=file:{LOG4J2_CONFIG}",
            )

        spark = (
            builder.config("spark.sql.shuffle.partitions", str(shuffle_partitions))
            .config("spark.driver.memory", DEFAULT_DRIVER_MEMORY)
            .config("spark.ui.showConsoleProgress", "false")
            .getOrCreate()
        )

        spark.sparkContext.setLogLevel("ERROR")

        return spark
    finally:
        os.chdir(original_cwd)
