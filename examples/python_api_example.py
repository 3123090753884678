"""Python API usage examples for kumorfm."""

from kumorfm import LocalGraph, LocalTable, PQLBuilder, save_graph

USERS = [
    {"user_id": 1, "signup_date": "2023-11-02", "plan": "free"},
    {"user_id": 2, "signup_date": "2023-12-15", "plan": "pro"},
    {"user_id": 3, "signup_date": "2024-01-08", "plan": "free"},
    {"user_id": 4, "signup_date": "2024-01-20", "plan": "free"},
]

ORDERS = [
    {"order_id": 101, "user_id": 1, "amount": 20.0, "created_at": "2024-01-03"},
    {"order_id": 102, "user_id": 2, "amount": 35.5, "created_at": "2024-01-04"},
    {"order_id": 103, "user_id": 1, "amount": 12.0, "created_at": "2024-02-11"},
    {"order_id": 104, "user_id": 3, "amount": None, "created_at": "2024-02-12"},
]


# Example 1: Infer metadata for a single table
def example_table_inference():
    """Table inference example."""
    print("Example 1: Table Inference")
    print("=" * 60)

    users = LocalTable(USERS, "users").infer_metadata()

    print(f"Primary key: {users.primary_key}")
    print(f"Time column: {users.time_column}")
    for column in users.metadata.columns:
        print(
            f"  {column.name}: {column.semantic_type} "
            f"(unique={column.unique_value_count}, nulls={column.null_count})"
        )


# Example 2: Build, link and validate a graph
def example_graph():
    """Graph building example."""
    print("\n\nExample 2: Graph Building")
    print("=" * 60)

    users = LocalTable(USERS, "users").infer_metadata()
    orders = LocalTable(ORDERS, "orders").infer_metadata()

    graph = LocalGraph([users, orders])
    created = graph.infer_links()
    print(f"Inferred {len(created)} links")

    graph.print_metadata()
    graph.print_links()
    print(graph.visualize())

    result = graph.validate()
    print(f"Valid: {result.valid}")
    for warning in result.warnings:
        print(f"  ⚠️  [{warning.type}] {warning.message}")

    save_graph(graph, "data/graphs/example.json")


# Example 3: Build predictive queries
def example_queries():
    """Query building example."""
    print("\n\nExample 3: Query Building")
    print("=" * 60)

    churn = (
        PQLBuilder()
        .predict("COUNT(orders.order_id) = 0")
        .for_("user_id")
        .where('users.plan = "free"')
    )
    print(churn.build())

    revenue = (
        PQLBuilder()
        .predict("SUM(orders.amount)")
        .for_("user_id")
        .order_by("SUM(orders.amount)")
        .limit(10)
    )
    print(revenue.build())

    parsed = PQLBuilder.parse(revenue.build())
    print(f"Parsed target: {parsed.predict_target}")


if __name__ == "__main__":
    example_table_inference()
    example_graph()
    example_queries()
