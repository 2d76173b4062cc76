#!/usr/bin/env python3
"""
Example usage of the SimpleDB in-memory database.
"""

from simpledb import CommandDispatcher, Store


def main():
    """Demonstrate the Store and the command protocol."""
    print("=== SimpleDB Demo ===\n")

    store = Store()
    print("1. Store initialized")

    # Basic operations
    print("\n2. Basic operations (no transaction, written straight away):")
    store.set("name", "Alice")
    store.set("city", "Paris")
    store.set("home", "Paris")
    print(f"   - Get name: {store.get('name')}")
    print(f"   - Keys equal to 'Paris': {store.num_equal_to('Paris')}")

    # Nested transactions
    print("\n3. Nested transactions:")
    store.begin()
    store.set("city", "Rome")
    print(f"   - Outer transaction: city={store.get('city')}")

    store.begin()
    store.unset("home")
    print(f"   - Inner transaction: home={store.get('home')}, "
          f"'Paris' count={store.num_equal_to('Paris')}")

    store.rollback()
    print(f"   - After rollback: home={store.get('home')}, "
          f"'Paris' count={store.num_equal_to('Paris')}")

    store.commit()
    print(f"   - After commit: city={store.get('city')}, depth={store.transaction_depth}")
    print(f"   - Commit with nothing open: {store.commit()}")

    # Command protocol
    print("\n4. Command protocol:")
    dispatcher = CommandDispatcher(store, echo=True)
    for line in dispatcher.process_input("\n".join([
        "GET city",
        "BEGIN",
        "SET city Oslo",
        "NUMEQUALTO Oslo",
        "ROLLBACK",
        "GET city",
        "ROLLBACK",
        "END",
    ])):
        print(f"   {line}")

    print("\n5. Final committed data:")
    for key, value in sorted(store.inspect().db.items()):
        print(f"   - {key}: {value}")

    print("\n=== Demo completed successfully! ===")


if __name__ == "__main__":
    main()
