"""Tests for Regenerator class."""

from unittest.mock import MagicMock

import pytest

from mediavariants.exceptions import UnsupportedFormatError
from mediavariants.regenerator import Regenerator
from mediavariants.variant_generator import VariantGenerator


class TestRegenerator:
    """Tests for Regenerator class."""
    
    @pytest.fixture
    def mock_generator(self, memory_store, sample_sizes):
        """Create a mock variant generator backed by the memory store."""
        gen = MagicMock(spec=VariantGenerator)
        gen.store = memory_store
        gen.generate.return_value = dict(sample_sizes)
        return gen
    
    @pytest.fixture
    def stored_originals(self, memory_store):
        memory_store.objects['page-2.png'] = b'png original'
        memory_store.objects['cover.webp'] = b'webp original'
        return memory_store
    
    def test_regenerates_records_without_variants(self, mock_generator, stored_originals,
                                                  sample_manifest, logger):
        regenerator = Regenerator(mock_generator, logger=logger)
        
        stats = regenerator.regenerate(sample_manifest)
        
        assert stats.successful == 2
        assert stats.skipped == 1
        assert stats.errors == 0
        assert stats.variants_generated == 10
        assert sample_manifest.get('2').has_variants
        mock_generator.generate.assert_any_call(b'png original', 'page-2.png', 'image/png')
    
    def test_force_includes_existing(self, mock_generator, stored_originals, sample_manifest, logger):
        stored_originals.objects['page-1.jpg'] = b'jpeg original'
        regenerator = Regenerator(mock_generator, force=True, logger=logger)
        
        stats = regenerator.regenerate(sample_manifest)
        
        assert stats.successful == 3
        assert stats.skipped == 0
    
    def test_missing_original_counts_error(self, mock_generator, memory_store, sample_manifest, logger):
        regenerator = Regenerator(mock_generator, logger=logger)
        
        stats = regenerator.regenerate(sample_manifest)
        
        assert stats.errors == 2
        assert stats.successful == 0
        assert 'page-2.png' in stats.error_details[0]
        mock_generator.generate.assert_not_called()
    
    def test_generation_error_does_not_abort(self, mock_generator, stored_originals,
                                             sample_manifest, logger, sample_sizes):
        mock_generator.generate.side_effect = [UnsupportedFormatError('bad header'), dict(sample_sizes)]
        regenerator = Regenerator(mock_generator, logger=logger)
        
        stats = regenerator.regenerate(sample_manifest)
        
        assert stats.errors == 1
        assert stats.successful == 1
        assert not sample_manifest.get('2').has_variants
        assert sample_manifest.get('3').has_variants
    
    def test_skips_records_without_filename(self, mock_generator, sample_manifest, logger):
        from mediavariants.media_record import MediaRecord
        sample_manifest.add_record(MediaRecord(id='4', filename=None))
        regenerator = Regenerator(mock_generator, dry_run=True, logger=logger)
        
        stats = regenerator.regenerate(sample_manifest)
        
        assert stats.skipped == 2
    
    def test_dry_run(self, mock_generator, memory_store, sample_manifest, logger):
        regenerator = Regenerator(mock_generator, dry_run=True, logger=logger)
        
        stats = regenerator.regenerate(sample_manifest)
        
        assert stats.successful == 2
        mock_generator.generate.assert_not_called()
        assert not sample_manifest.get('2').has_variants
    
    def test_limit(self, mock_generator, stored_originals, sample_manifest, logger):
        regenerator = Regenerator(mock_generator, logger=logger)
        
        stats = regenerator.regenerate(sample_manifest, limit=1)
        
        assert stats.successful == 1
        assert mock_generator.generate.call_count == 1
    
    def test_can_be_stopped(self, mock_generator, stored_originals, sample_manifest, logger):
        regenerator = Regenerator(mock_generator, logger=logger)
        
        regenerator.stop()
        stats = regenerator.regenerate(sample_manifest)
        
        assert stats.successful == 0
        mock_generator.generate.assert_not_called()
    
    def test_end_to_end_with_real_generator(self, memory_store, portable_codec, sample_manifest,
                                            make_image_bytes, logger):
        memory_store.objects['page-2.png'] = make_image_bytes(64, 48, 'PNG')
        memory_store.objects['cover.webp'] = make_image_bytes(48, 64, 'WEBP')
        generator = VariantGenerator(memory_store, codec=portable_codec, logger=logger)
        
        stats = Regenerator(generator, logger=logger).regenerate(sample_manifest)
        
        assert stats.successful == 2
        record = sample_manifest.get('3')
        assert len(record.image_sizes) == 7
        assert record.image_sizes['avatar'].filename == 'cover-avatar.webp'
        assert 'cover-avatar.webp' in memory_store.objects
