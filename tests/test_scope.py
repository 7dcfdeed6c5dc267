from google.protobuf import descriptor_pb2 as d2

from protoc_mson.scope import Scope, parse_reference, resolve_within

_FD = d2.FieldDescriptorProto


def _make_file(package: str = "shop") -> d2.FileDescriptorProto:
    fi = d2.FileDescriptorProto(name="shop/order.proto", package=package)
    baz = fi.message_type.add(name="Baz")
    baz.field.add(name="id", number=1, type=_FD.TYPE_INT32)
    foo = fi.message_type.add(name="Foo")
    foo.field.add(name="bar", number=1, type=_FD.TYPE_MESSAGE, type_name=".shop.Baz")
    inner = foo.nested_type.add(name="Inner")
    inner.field.add(name="note", number=1, type=_FD.TYPE_STRING)
    status = fi.enum_type.add(name="Status")
    status.value.add(name="UNKNOWN", number=0)
    status.value.add(name="DONE", number=1)
    svc = fi.service.add(name="OrderService")
    svc.method.add(name="Place", input_type=".shop.Foo", output_type=".shop.Baz")
    return fi


class TestScopeBasics:
    def test_with_does_not_mutate(self):
        base = Scope(["shop"])
        child = base.with_("Foo", "bar")
        assert str(base) == "shop"
        assert str(child) == "shop.Foo.bar"

    def test_equality_by_dotted_string(self):
        assert Scope(["com.example", "Foo"]) == Scope(["com", "example", "Foo"])
        assert hash(Scope(["com.example", "Foo"])) == hash(Scope(["com", "example", "Foo"]))
        assert Scope(["a"]) != Scope(["b"])

    def test_empty_scope_is_root(self):
        assert str(Scope()) == ""
        assert not Scope()
        assert len(Scope()) == 0


class TestParseReference:
    def test_empty(self):
        scope, absolute = parse_reference("")
        assert len(scope) == 0
        assert absolute is False

    def test_relative_splits_every_segment(self):
        scope, absolute = parse_reference("Outer.Inner")
        assert scope.segments == ("Outer", "Inner")
        assert absolute is False

    def test_absolute_folds_package(self):
        scope, absolute = parse_reference(".com.example_2.Foo.Bar")
        assert absolute is True
        assert scope.segments == ("com.example_2", "Foo", "Bar")

    def test_absolute_without_package(self):
        scope, absolute = parse_reference(".Foo.bar")
        assert absolute is True
        assert scope.segments == ("Foo", "bar")

    def test_absolute_package_stops_at_first_typename(self):
        # lowercase segments after the first type name are not part of the package
        scope, _ = parse_reference(".pkg.Foo.field_name")
        assert scope.segments == ("pkg", "Foo", "field_name")

    def test_relative_round_trip(self):
        for text in ["Foo", "Foo.Bar", "pkg.Foo.bar", "a.b.c"]:
            scope, absolute = parse_reference(text)
            assert absolute is False
            assert str(scope) == text
            assert parse_reference(str(scope))[0] == scope


class TestResolve:
    def test_resolve_message(self):
        fi = _make_file()
        found = Scope(["shop", "Foo"]).resolve(fi)
        assert found is not None
        assert found.name == "Foo"

    def test_resolve_nested_field(self):
        fi = _make_file()
        found = Scope(["shop", "Foo", "Inner", "note"]).resolve(fi)
        assert found is not None
        assert found.name == "note"
        assert found.type == _FD.TYPE_STRING

    def test_resolve_enum_value(self):
        fi = _make_file()
        found = Scope(["shop", "Status", "DONE"]).resolve(fi)
        assert found is not None
        assert found.number == 1

    def test_resolve_method(self):
        fi = _make_file()
        found = Scope(["shop", "OrderService", "Place"]).resolve(fi)
        assert found is not None
        assert found.input_type == ".shop.Foo"

    def test_wrong_package_fails(self):
        fi = _make_file()
        assert Scope(["other", "Foo"]).resolve(fi) is None

    def test_partial_mismatch_fails(self):
        fi = _make_file()
        assert Scope(["shop", "Foo", "Missing"]).resolve(fi) is None
        assert Scope(["shop", "Foo", "bar", "deeper"]).resolve(fi) is None

    def test_package_only_resolves_to_file(self):
        fi = _make_file()
        assert Scope(["shop"]).resolve(fi) is fi

    def test_empty_scope_resolves_to_root(self):
        fi = _make_file()
        assert Scope().resolve(fi) is fi

    def test_file_without_package(self):
        fi = _make_file(package="")
        found = Scope(["Foo", "Inner"]).resolve(fi)
        assert found is not None
        assert found.name == "Inner"

    def test_multi_segment_package_needs_folded_segment(self):
        fi = _make_file(package="com.shop")
        assert Scope(["com", "shop", "Foo"]).resolve(fi) is None
        scope, _ = parse_reference(".com.shop.Foo")
        assert scope.resolve(fi).name == "Foo"

    def test_resolve_from_message_root(self):
        fi = _make_file()
        foo = fi.message_type[1]
        assert Scope(["Foo", "Inner"]).resolve(foo).name == "Inner"
        assert Scope(["Inner"]).resolve(foo) is None

    def test_resolve_within_searches_children(self):
        fi = _make_file()
        foo = fi.message_type[1]
        assert resolve_within(foo, Scope(["Inner"])).name == "Inner"
        assert resolve_within(foo.field[0], Scope(["Inner"])) is None
