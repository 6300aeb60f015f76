from openapi_synth.schema.naming import SchemaNameRegistry, key_digest


class TestKeyDigest:
    def test_order_independent(self):
        assert key_digest(["b", "a", "c"]) == key_digest(["c", "b", "a"])

    def test_hex_digest(self):
        digest = key_digest(["id", "name"])
        assert len(digest) == 16
        assert all(c in "0123456789abcdef" for c in digest)

    def test_different_keys(self):
        assert key_digest(["id"]) != key_digest(["id", "name"])

    def test_key_boundaries_matter(self):
        assert key_digest(["ab"]) != key_digest(["a", "b"])
        assert key_digest(["a", "bc"]) != key_digest(["ab", "c"])


class TestSchemaNameRegistry:
    def test_unregistered_keys_use_digest(self):
        registry = SchemaNameRegistry()
        assert registry.get_name(["id"]) == key_digest(["id"])
        assert len(registry) == 0

    def test_set_name(self):
        registry = SchemaNameRegistry()
        digest = registry.set_name("Pet", ["name", "id"])
        assert digest in registry
        assert registry.get_name(["id", "name"]) == "Pet"

    def test_same_name_twice_is_not_a_collision(self):
        registry = SchemaNameRegistry()
        registry.set_name("Pet", ["id"])
        registry.set_name("Pet", ["id"])
        assert registry.collisions == []

    def test_collision_recorded_and_newer_name_wins(self):
        registry = SchemaNameRegistry()
        registry.set_name("Pet", ["id"])
        registry.set_name("Animal", ["id"])
        assert registry.get_name(["id"]) == "Animal"
        assert len(registry.collisions) == 1
        collision = registry.collisions[0]
        assert (collision.previous, collision.name) == ("Pet", "Animal")
        assert "collision" in str(collision)
