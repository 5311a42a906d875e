"""
Command Line Interface for image variant generation.
"""

import argparse
import json
import logging
import sys
from typing import List, Optional

import urllib3

from .capability import native_codec_available, select_codec
from .catalog import IMAGE_VARIANTS
from .cleanup import delete_media_record
from .exceptions import MediaVariantsError
from .local_client import LocalClient, LocalConfig
from .manifest import MediaManifest
from .models import metadata_map_to_dict
from .pipeline_config import PipelineConfig
from .publisher import ObjectStorePublisher
from .regenerator import Regenerator
from .reporter import Reporter
from .s3_client import S3Client
from .s3_config import S3Config
from .variant_generator import VariantGenerator


def setup_logging(verbose: bool) -> logging.Logger:
    """Configure logging."""
    level = logging.DEBUG if verbose else logging.INFO
    
    logging.basicConfig(
        level=level,
        format='%(asctime)s [%(levelname)s] %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )
    
    logging.getLogger('boto3').setLevel(logging.WARNING)
    logging.getLogger('botocore').setLevel(logging.WARNING)
    logging.getLogger('urllib3').setLevel(logging.WARNING)
    logging.getLogger('pyvips').setLevel(logging.WARNING)
    
    return logging.getLogger('mediavariants')


def get_s3_config(args: argparse.Namespace) -> S3Config:
    """Get S3 configuration from environment and CLI overrides."""
    config = S3Config.from_env()
    
    if getattr(args, 's3_endpoint', None):
        config.endpoint = args.s3_endpoint
    if getattr(args, 's3_bucket', None):
        config.bucket = args.s3_bucket
    if getattr(args, 's3_prefix', None):
        config.prefix = args.s3_prefix
    if getattr(args, 's3_access_key', None):
        config.access_key = args.s3_access_key
    if getattr(args, 's3_secret_key', None):
        config.secret_key = args.s3_secret_key
    
    return config


def get_pipeline_config(args: argparse.Namespace) -> PipelineConfig:
    """Get pipeline configuration from environment and CLI overrides."""
    config = PipelineConfig.from_env()
    
    if getattr(args, 'url_base', None) is not None:
        config.url_base = args.url_base or None
    if getattr(args, 'workers', None):
        config.max_workers = args.workers
        config.env_errors = []
    if getattr(args, 'codec', None):
        config.codec = args.codec
    
    return config


def get_storage_client(args: argparse.Namespace, logger: logging.Logger):
    """
    Get the object store selected by the arguments.
    
    Raises:
        ValueError: If the storage configuration is invalid
    """
    local_root = getattr(args, 'local_root', None)
    
    if local_root:
        config = LocalConfig(root_path=local_root, prefix=args.local_prefix or '')
        errors = config.validate()
        if errors:
            for error in errors:
                logger.error(error)
            raise ValueError("Local configuration invalid")
        logger.info(f"Storage: Local filesystem ({config.base_path})")
        return LocalClient(config, logger)
    
    config = get_s3_config(args)
    errors = config.validate()
    if errors:
        for error in errors:
            logger.error(error)
        raise ValueError("S3 configuration invalid")
    
    if not config.verify_ssl:
        urllib3.disable_warnings(urllib3.exceptions.InsecureRequestWarning)
    logger.info(f"Storage: S3 {config.endpoint or 'default endpoint'} bucket {config.bucket}")
    return S3Client(config, logger)


def build_generator(args: argparse.Namespace, logger: logging.Logger) -> VariantGenerator:
    """
    Build a VariantGenerator from arguments and environment.
    
    Raises:
        ValueError: If storage or pipeline configuration is invalid
    """
    config = get_pipeline_config(args)
    errors = config.validate()
    if errors:
        for error in errors:
            logger.error(error)
        raise ValueError("Pipeline configuration invalid")
    
    store = get_storage_client(args, logger)
    return VariantGenerator(
        store,
        codec=select_codec(config.codec, log=logger),
        url_base=config.url_base,
        max_workers=config.max_workers,
        logger=logger,
    )


def add_storage_arguments(parser: argparse.ArgumentParser) -> None:
    """Add storage configuration arguments to a parser."""
    local_group = parser.add_argument_group('Local Storage')
    local_group.add_argument('--local-root', metavar='PATH',
                             help='Use local filesystem instead of S3')
    local_group.add_argument('--local-prefix', default='media',
                             help='Prefix within local root (default: media)')
    
    s3_group = parser.add_argument_group('S3 Storage')
    s3_group.add_argument('--s3-endpoint', help='Override S3_ENDPOINT')
    s3_group.add_argument('--s3-bucket', help='Override S3_BUCKET')
    s3_group.add_argument('--s3-prefix', help='Override S3_PREFIX')
    s3_group.add_argument('--s3-access-key', help='Override S3_ACCESS_KEY')
    s3_group.add_argument('--s3-secret-key', help='Override S3_SECRET_KEY')


def add_pipeline_arguments(parser: argparse.ArgumentParser) -> None:
    """Add variant pipeline arguments to a parser."""
    group = parser.add_argument_group('Pipeline')
    group.add_argument('--url-base', help='Override MEDIAVARIANTS_URL_BASE (empty: use store URLs)')
    group.add_argument('--workers', type=int, help='Override MEDIAVARIANTS_MAX_WORKERS')
    group.add_argument('--codec', choices=['auto', 'native', 'portable'],
                       help='Override MEDIAVARIANTS_CODEC')


def load_manifest(path: str, logger: logging.Logger) -> Optional[MediaManifest]:
    try:
        return MediaManifest.load(path)
    except FileNotFoundError:
        logger.error(f"Manifest not found: {path}")
    except (ValueError, KeyError) as e:
        logger.error(f"Failed to load manifest: {e}")
    return None


def cmd_probe(args: argparse.Namespace) -> int:
    """Execute probe command."""
    setup_logging(args.verbose)
    codec = select_codec(args.codec or 'auto')
    
    print(f"libvips available: {'yes' if native_codec_available() else 'no'}")
    print(f"Selected codec:    {codec.name}")
    print(f"Formats:           {', '.join(sorted(f.name for f in codec.formats))}")
    print(f"Shrink-on-load:    {'yes' if codec.supports_shrink_on_load else 'no'}")
    return 0


def cmd_generate(args: argparse.Namespace) -> int:
    """Execute generate command for a single image file."""
    logger = setup_logging(args.verbose)
    
    try:
        with open(args.file, 'rb') as f:
            image_data = f.read()
    except OSError as e:
        logger.error(f"Cannot read {args.file}: {e}")
        return 1
    
    filename = args.filename or args.file
    
    try:
        generator = build_generator(args, logger)
    except ValueError:
        return 1
    
    try:
        if args.dry_run:
            variants = generator.generate_variants(image_data, filename, args.mimetype)
            for variant in variants:
                print(f"{variant.name:<18} {variant.width}x{variant.height}\t"
                      f"{variant.file_size:>9} bytes\t{variant.filename}")
            return 0
        
        sizes = generator.generate(image_data, filename, args.mimetype)
    except MediaVariantsError as e:
        logger.error(f"Variant generation failed for {filename}: {e}")
        return 1
    
    output = json.dumps(metadata_map_to_dict(sizes), indent=2)
    if args.output:
        with open(args.output, 'w') as f:
            f.write(output + '\n')
        logger.info(f"Metadata written to {args.output}")
    else:
        print(output)
    
    return 0 if len(sizes) == len(generator.catalog) else 2


def cmd_regenerate(args: argparse.Namespace) -> int:
    """Execute regenerate command over a manifest."""
    logger = setup_logging(args.verbose)
    
    manifest = load_manifest(args.manifest, logger)
    if manifest is None:
        return 1
    logger.info(f"Loaded manifest: {args.manifest} ({manifest.total_records} records)")
    
    try:
        generator = build_generator(args, logger)
    except ValueError:
        return 1
    
    regenerator = Regenerator(
        generator,
        cadence=args.cadence,
        dry_run=args.dry_run,
        force=args.force,
        logger=logger,
    )
    
    try:
        stats = regenerator.regenerate(manifest, limit=args.limit)
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        if not args.dry_run:
            manifest.save(args.manifest)
        return 130
    
    if not args.dry_run:
        manifest.save(args.manifest)
        logger.info(f"Manifest updated: {args.manifest}")
    
    print()
    print(f"Total items:  {stats.total}")
    print(f"Successful:   {stats.successful}")
    print(f"Errors:       {stats.errors}")
    print(f"Skipped:      {stats.skipped}")
    print(f"Time:         {stats.elapsed_seconds:.1f}s")
    
    return 0 if stats.errors == 0 else 1


def cmd_delete(args: argparse.Namespace) -> int:
    """Execute delete command: remove a record and its variant files."""
    logger = setup_logging(args.verbose)
    
    manifest = load_manifest(args.manifest, logger)
    if manifest is None:
        return 1
    
    try:
        store = get_storage_client(args, logger)
    except ValueError:
        return 1
    
    result = delete_media_record(
        manifest,
        args.id,
        ObjectStorePublisher(store, logger=logger),
        delete_original=args.delete_original,
    )
    if result is None:
        return 1
    
    manifest.save(args.manifest)
    logger.info(f"Deleted record {args.id}: {len(result.deleted)} files removed, {len(result.failed)} failed")
    return 0 if not result.failed else 1


def cmd_report(args: argparse.Namespace) -> int:
    """Execute report command."""
    logger = setup_logging(args.verbose)
    
    manifest = load_manifest(args.manifest, logger)
    if manifest is None:
        return 1
    
    reporter = Reporter(catalog=IMAGE_VARIANTS)
    if args.type == 'summary':
        reporter.report_summary(manifest)
    elif args.type == 'missing':
        reporter.report_missing(manifest)
    
    return 0


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog='mediavariants',
        description='Image variant generation for the media library',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m mediavariants probe
  python -m mediavariants generate page-12.png --local-root ./storage
  python -m mediavariants regenerate -m media.json
  python -m mediavariants delete -m media.json --id 42
  python -m mediavariants report -m media.json --type missing

Storage options:
  Use --local-root for local filesystem, or S3 environment variables for S3.
"""
    )
    
    parser.add_argument('-v', '--verbose', action='store_true', help='Enable verbose logging')
    
    subparsers = parser.add_subparsers(dest='command', help='Command to run')
    
    probe_parser = subparsers.add_parser('probe', help='Show the codec backend for this runtime')
    probe_parser.add_argument('--codec', choices=['auto', 'native', 'portable'], help='Codec preference')
    probe_parser.add_argument('-v', '--verbose', action='store_true', help='Enable verbose logging')
    
    gen_parser = subparsers.add_parser('generate', help='Generate variants for one image file')
    gen_parser.add_argument('file', help='Original image file')
    gen_parser.add_argument('--filename', help='Original filename to name variants by (default: FILE)')
    gen_parser.add_argument('--mimetype', help='Declared mime type (advisory)')
    gen_parser.add_argument('-o', '--output', help='Write metadata JSON here instead of stdout')
    gen_parser.add_argument('-n', '--dry-run', action='store_true', help='Resize and encode, but do not upload')
    gen_parser.add_argument('-v', '--verbose', action='store_true', help='Enable verbose logging')
    add_pipeline_arguments(gen_parser)
    add_storage_arguments(gen_parser)
    
    regen_parser = subparsers.add_parser('regenerate', help='Regenerate variants for media records')
    regen_parser.add_argument('-m', '--manifest', required=True, help='Media manifest JSON (updated in place)')
    regen_parser.add_argument('-c', '--cadence', type=float, default=0.0, help='Seconds between records')
    regen_parser.add_argument('-f', '--force', action='store_true', help='Regenerate records that have variants')
    regen_parser.add_argument('-n', '--dry-run', action='store_true', help='Show what would be done')
    regen_parser.add_argument('--limit', type=int, metavar='N', help='Regenerate at most N records')
    regen_parser.add_argument('-v', '--verbose', action='store_true', help='Enable verbose logging')
    add_pipeline_arguments(regen_parser)
    add_storage_arguments(regen_parser)
    
    delete_parser = subparsers.add_parser('delete', help='Delete a media record and its variants')
    delete_parser.add_argument('-m', '--manifest', required=True, help='Media manifest JSON (updated in place)')
    delete_parser.add_argument('--id', required=True, help='Media record id')
    delete_parser.add_argument('--delete-original', action='store_true', help='Also delete the original upload')
    delete_parser.add_argument('-v', '--verbose', action='store_true', help='Enable verbose logging')
    add_storage_arguments(delete_parser)
    
    report_parser = subparsers.add_parser('report', help='Report variant coverage')
    report_parser.add_argument('-m', '--manifest', required=True, help='Media manifest JSON')
    report_parser.add_argument('-t', '--type', choices=['summary', 'missing'], default='summary',
                               help='Report type')
    report_parser.add_argument('-v', '--verbose', action='store_true', help='Enable verbose logging')
    
    return parser


def main(args: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = create_parser()
    parsed_args = parser.parse_args(args)
    
    if not parsed_args.command:
        parser.print_help()
        return 1
    
    commands = {
        'probe': cmd_probe,
        'generate': cmd_generate,
        'regenerate': cmd_regenerate,
        'delete': cmd_delete,
        'report': cmd_report,
    }
    return commands[parsed_args.command](parsed_args)


if __name__ == '__main__':
    sys.exit(main())
