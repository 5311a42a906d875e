"""Tests for record deletion cleanup."""

from mediavariants.cleanup import delete_media_record
from mediavariants.publisher import ObjectStorePublisher


class TestDeleteMediaRecord:
    """Tests for delete_media_record."""
    
    def test_deletes_each_variant_once(self, sample_manifest, memory_store):
        result = delete_media_record(sample_manifest, '1', ObjectStorePublisher(memory_store))
        
        assert len(memory_store.delete_calls) == 5
        assert len(result.deleted) == 5
        assert sample_manifest.get('1') is None
    
    def test_failed_delete_does_not_block_others(self, sample_manifest, memory_store):
        memory_store.fail_delete.add('page-1-webcomic_page.jpg')
        
        result = delete_media_record(sample_manifest, '1', ObjectStorePublisher(memory_store))
        
        assert len(memory_store.delete_calls) == 5
        assert list(result.failed) == ['page-1-webcomic_page.jpg']
        assert len(result.deleted) == 4
        assert sample_manifest.get('1') is None
    
    def test_record_without_variants(self, sample_manifest, memory_store):
        result = delete_media_record(sample_manifest, '2', ObjectStorePublisher(memory_store))
        
        assert result.attempted == 0
        assert memory_store.delete_calls == []
        assert sample_manifest.get('2') is None
    
    def test_delete_original(self, sample_manifest, memory_store):
        result = delete_media_record(sample_manifest, '1', ObjectStorePublisher(memory_store),
                                     delete_original=True)
        
        assert 'page-1.jpg' in memory_store.delete_calls
        assert len(memory_store.delete_calls) == 6
        assert 'page-1.jpg' in result.deleted
    
    def test_unknown_record(self, sample_manifest, memory_store):
        assert delete_media_record(sample_manifest, '99', ObjectStorePublisher(memory_store)) is None
        assert sample_manifest.total_records == 3
