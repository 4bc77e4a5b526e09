from decimal import Decimal

import pytest
from storefront.cart.cart import CART_SLOT, CartStore
from storefront.catalog.port import Product
from storefront.exceptions import PersistenceError
from storefront.persistence.adapter import PersistenceAdapter
from storefront.persistence.file_store import FileStore


@pytest.fixture
def file_store(tmp_path):
    return FileStore(tmp_path / "state")


class TestFileStore:
    def test_missing_key(self, file_store):
        assert file_store.get("cart") is None

    def test_set_and_get(self, file_store):
        file_store.set("cart", '[{"a": 1}]')
        assert file_store.get("cart") == '[{"a": 1}]'

    def test_overwrite_leaves_no_temp_files(self, file_store):
        file_store.set("cart", "[]")
        file_store.set("cart", "[1]")
        assert sorted(p.name for p in file_store.directory.iterdir()) == ["cart.json"]

    def test_keys_are_made_filename_safe(self, file_store):
        file_store.set("shop/cart:1", "[]")
        assert (file_store.directory / "shop_cart_1.json").exists()

    def test_delete(self, file_store):
        file_store.set("cart", "[]")
        file_store.delete("cart")
        file_store.delete("cart")
        assert file_store.get("cart") is None

    def test_unreadable_entry(self, file_store):
        (file_store.directory / "cart.json").mkdir(parents=True)
        with pytest.raises(PersistenceError):
            file_store.get("cart")

    def test_undecodable_entry(self, file_store):
        file_store.directory.mkdir(parents=True)
        (file_store.directory / "cart.json").write_bytes(b"\xff\xfe[]")
        with pytest.raises(PersistenceError):
            file_store.get("cart")


class TestCartOnDisk:
    def test_cart_survives_restart(self, tmp_path):
        product = Product(id="prod-a", name="Apples", price=Decimal("10.00"), unit="kg")
        cart = CartStore(PersistenceAdapter(FileStore(tmp_path), key_prefix="shop"))
        cart.add_item(product)
        cart.add_item(product)

        restarted = CartStore(PersistenceAdapter(FileStore(tmp_path), key_prefix="shop"))
        assert restarted.get_item("prod-a").quantity == 2
        assert restarted.get_total() == Decimal("20.00")

    def test_corrupt_file_starts_empty(self, tmp_path):
        (tmp_path / "shop_cart.json").write_text("{{{", encoding="utf-8")
        cart = CartStore(PersistenceAdapter(FileStore(tmp_path), key_prefix="shop"))
        assert cart.is_empty

    def test_undecodable_file_starts_empty(self, tmp_path):
        (tmp_path / "shop_cart.json").write_bytes(b"\xff\xfe[]")
        cart = CartStore(PersistenceAdapter(FileStore(tmp_path), key_prefix="shop"))
        assert cart.is_empty

    def test_cleared_cart_removes_file(self, tmp_path):
        persistence = PersistenceAdapter(FileStore(tmp_path), key_prefix="shop")
        cart = CartStore(persistence)
        cart.add_item(Product(id="p", name="P", price=Decimal("1"), unit=""))
        assert (tmp_path / "shop_cart.json").exists()
        cart.clear()
        assert not (tmp_path / "shop_cart.json").exists()
        assert persistence.load(CART_SLOT) == []
