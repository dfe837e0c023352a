"""Tests for protoweave.types.model and protoweave.types.typeset."""

from __future__ import annotations

from google.protobuf import descriptor_pb2

from protoweave.types import (
    EnumType,
    MessageType,
    Prefix,
    ServiceType,
    TypeSet,
    TypeUrl,
    TypeUrlPrefixes,
)
from protoweave.types.model import outer_class_name
from tests._fixtures.descriptors import (
    INT64,
    STRING,
    file_options,
    file_proto,
    linked_files,
    message,
    uuid_message,
)


def _order_file(**options: object) -> descriptor_pb2.FileDescriptorProto:
    attributes = message("AttributesEntry", ("key", STRING), ("value", STRING))
    attributes.options.map_entry = True
    order = message("Order", ("id", STRING), nested=[message("Line", ("sku", STRING)), attributes])
    order.enum_type.add(name="Status").value.add(name="STATUS_UNKNOWN", number=0)
    return file_proto(
        "acme/orders.proto",
        "com.acme",
        messages=[order, message("Customer")],
        enums=["Region"],
        services=["OrderService"],
        options=file_options(**options) if options else None,
    )


def test_from_file_collects_declarations_in_order() -> None:
    files = linked_files(_order_file())

    types = TypeSet.from_file(files.try_find("acme/orders.proto"))

    assert types.names() == [
        "com.acme.Order",
        "com.acme.Order.Line",
        "com.acme.Order.Status",
        "com.acme.Customer",
        "com.acme.Region",
        "com.acme.OrderService",
    ]
    assert [type(type_) for type_ in types] == [
        MessageType,
        MessageType,
        EnumType,
        MessageType,
        EnumType,
        ServiceType,
    ]
    assert [message.simple_name for message in types.messages()] == ["Order", "Line", "Customer"]


def test_java_symbols_of_types_in_outer_class() -> None:
    types = TypeSet.from_file(linked_files(_order_file()).try_find("acme/orders.proto"))

    line = types.find("com.acme.Order.Line")
    assert line is not None
    assert line.target == "com.acme.Orders.Order.Line"
    assert line.source_file == "com/acme/Orders.java"
    assert line.parent is not None and line.parent.name == "com.acme.Order"
    assert not line.is_top_level
    assert line.root().name == "com.acme.Order"


def test_java_symbols_with_multiple_files_and_java_package() -> None:
    raw = _order_file(java_multiple_files=True, java_package="io.acme.orders")
    types = TypeSet.from_file(linked_files(raw).try_find("acme/orders.proto"))

    line = types.find("com.acme.Order.Line")
    assert line is not None
    assert line.target == "io.acme.orders.Order.Line"
    assert line.source_file == "io/acme/orders/Order.java"
    service = types.find("com.acme.OrderService")
    assert service is not None
    assert service.target == "io.acme.orders.OrderServiceGrpc"
    assert service.source_file == "io/acme/orders/OrderServiceGrpc.java"


def test_outer_class_name_rules() -> None:
    clash = linked_files(
        file_proto("order_placed.proto", "com.acme", messages=[message("OrderPlaced")])
    ).try_find("order_placed.proto")
    explicit = linked_files(
        file_proto(
            "events.proto",
            "com.acme",
            options=file_options(java_outer_classname="EventsProto"),
        )
    ).try_find("events.proto")
    plain = linked_files(file_proto("v2/orders_events.proto", "com.acme")).try_find(
        "v2/orders_events.proto"
    )

    assert outer_class_name(clash) == "OrderPlacedOuterClass"
    assert outer_class_name(explicit) == "EventsProto"
    assert outer_class_name(plain) == "OrdersEvents"


def test_outer_class_name_clashes_with_nested_declarations() -> None:
    nested_message = linked_files(
        file_proto(
            "orders.proto",
            "com.acme",
            messages=[message("Envelope", nested=[message("Orders")])],
        )
    ).try_find("orders.proto")
    envelope = message("Envelope")
    envelope.nested_type.add(name="Holder").enum_type.add(name="Shipping").value.add(
        name="SHIPPING_UNKNOWN", number=0
    )
    nested_enum = linked_files(
        file_proto("shipping.proto", "com.acme", messages=[envelope])
    ).try_find("shipping.proto")

    assert outer_class_name(nested_message) == "OrdersOuterClass"
    assert outer_class_name(nested_enum) == "ShippingOuterClass"
    types = TypeSet.from_file(nested_message)
    inner = types.find("com.acme.Envelope.Orders")
    assert inner is not None
    assert inner.target == "com.acme.OrdersOuterClass.Envelope.Orders"
    assert inner.source_file == "com/acme/OrdersOuterClass.java"


def test_uuid_value_classification() -> None:
    raw = file_proto(
        "ids.proto",
        "com.acme",
        messages=[
            uuid_message("OrderId"),
            message("Counter", ("uuid", INT64)),
            message("Pair", ("uuid", STRING), ("other", STRING)),
            message("Named", ("value", STRING)),
        ],
    )
    types = TypeSet.from_file(linked_files(raw).try_find("ids.proto"))

    assert [type_.simple_name for type_ in types.messages() if type_.is_uuid_value()] == [
        "OrderId"
    ]


def test_type_urls_follow_prefixes() -> None:
    files = linked_files(
        file_proto("a.proto", "com.acme", messages=[message("A")]),
        file_proto("b.proto", "com.acme", messages=[message("B")]),
    )
    prefixes = TypeUrlPrefixes("type.acme.io", {"b.proto": "type.b.acme.io"})

    types = TypeSet.from_files(files, prefixes)

    assert types.find("com.acme.A").url == TypeUrl("type.acme.io", "com.acme.A")
    assert types.find("com.acme.B").url == TypeUrl("type.b.acme.io", "com.acme.B")


def test_google_types_always_use_google_apis_prefix() -> None:
    raw = file_proto("google/protobuf/extra.proto", "google.protobuf", messages=[message("Extra")])
    extra_file = linked_files(raw).try_find("google/protobuf/extra.proto")

    types = TypeSet.from_file(extra_file, TypeUrlPrefixes("type.acme.io"))

    extra = types.find("google.protobuf.Extra")
    assert extra.url.prefix == Prefix.GOOGLE_APIS.value
    assert extra.is_google()


def test_union_keeps_existing_types_and_compares_by_names() -> None:
    first = linked_files(file_proto("a.proto", "com.acme", messages=[message("A")]))
    second = linked_files(file_proto("a2.proto", "com.acme", messages=[message("A"), message("B")]))
    left = TypeSet.from_files(first)
    right = TypeSet.from_files(second)

    union = left.union(right)

    assert union.names() == ["com.acme.A", "com.acme.B"]
    assert union.find("com.acme.A").declaring_file_name == "a.proto"
    assert union == TypeSet(reversed(union.all_types()))
    assert left.size == 1 and not left.is_empty()
