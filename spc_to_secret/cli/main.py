"""CLI entrypoint for spc-to-secret."""
import sys
import argparse
import logging

from spc_to_secret.secrets.domains.errors import SpcToSecretError, UsageError

from .validators import validate_input_path, validate_output_path

VERSION = "0.1.0"

logger = logging.getLogger(__name__)


def _configure_logging(verbosity: int) -> None:
    """Send log output to stderr; -v for INFO, -vv for DEBUG."""
    if verbosity >= 2:
        level = logging.DEBUG
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(message)s",
        stream=sys.stderr,
    )


def _build_config(args):
    """Load the config file and apply command-line overrides."""
    from spc_to_secret.secrets.domains.config_loader import load_config

    overrides = {
        "backend": args.backend,
        "aws": {"region": args.region, "profile": args.profile},
        "gcp": {"project_id": args.project_id},
    }
    return load_config(args.config, overrides)


def cmd_convert(args):
    """Convert a SecretProviderClass into a Secret manifest."""
    from spc_to_secret.secrets.workflows.secret_operations import convert_file

    validate_input_path(args.input)
    validate_output_path(args.output)

    config = _build_config(args)
    convert_file(args.input, args.output, config=config)
    print(f"Success: Secret YAML created at {args.output}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="spc-to-secret",
        description="Render a SecretProviderClass into a static Kubernetes Secret manifest",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Exit codes:
  0 - Success
  1 - Runtime error (parse, secret fetch, JMESPath, output, etc.)
  2 - Usage error (wrong arguments, missing input file, etc.)

Configuration:
  Default location: ~/.config/spc-to-secret/config.yml
  Custom path: --config <path>

Credentials and region are discovered the same way the AWS or GCP SDK does.
        """
    )
    parser.add_argument(
        "input",
        help="SecretProviderClass YAML file"
    )
    parser.add_argument(
        "output",
        help="Path of the Secret YAML to write"
    )
    parser.add_argument(
        "--config",
        help="Config file (default: ~/.config/spc-to-secret/config.yml)"
    )
    parser.add_argument(
        "--backend",
        choices=["aws", "gcp"],
        help="Secret store backend (overrides config file, default: aws)"
    )
    parser.add_argument(
        "--region",
        help="AWS region (overrides config file and SDK discovery)"
    )
    parser.add_argument(
        "--profile",
        help="AWS named profile"
    )
    parser.add_argument(
        "--project-id",
        help="GCP project ID for the gcp backend"
    )
    parser.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="Increase log output (-v info, -vv debug)"
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"spc-to-secret {VERSION}"
    )
    return parser


def main(argv=None):
    """Main CLI entrypoint.

    Exit codes:
        0 - Success
        1 - Runtime errors (parse, fetch, extraction, IO, etc.)
        2 - Usage errors (invalid arguments, missing input file, etc.)
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)

    try:
        cmd_convert(args)
    except UsageError as e:
        print(f"Error: {e}", file=sys.stderr)
        parser.print_usage(sys.stderr)
        sys.exit(2)
    except SpcToSecretError as e:
        logger.debug("Conversion failed", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    except KeyboardInterrupt:
        print("\nInterrupted", file=sys.stderr)
        sys.exit(1)
    except Exception as e:
        logger.debug("Unexpected failure", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    sys.exit(0)


if __name__ == "__main__":
    main()
