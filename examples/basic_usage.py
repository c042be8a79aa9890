#!/usr/bin/env python3
"""
Basic usage examples for the wrapped DynamoDB client.

This example demonstrates:
1. Setting up configuration and logging
2. Creating a table and waiting for it
3. Single item put/get with a projection
4. Bulk puts with automatic chunking and retry of unprocessed items
5. Purging every item from a table
6. Cancelling a long-running bulk operation
"""

import asyncio
import logging
from decimal import Decimal

from boto3.dynamodb.conditions import Key

from wrapped_dynamodb import DynamoDBConfig, WrappedDynamoDBClient

TABLE_NAME = "orders"

TABLE_OPTIONS = {
    'AttributeDefinitions': [
        {'AttributeName': 'customer_id', 'AttributeType': 'S'},
        {'AttributeName': 'order_id', 'AttributeType': 'N'},
    ],
    'KeySchema': [
        {'AttributeName': 'customer_id', 'KeyType': 'HASH'},
        {'AttributeName': 'order_id', 'KeyType': 'RANGE'},
    ],
    'BillingMode': 'PAY_PER_REQUEST',
}


async def main():
    """Demonstrate basic usage of the wrapped DynamoDB client."""

    # 1. Configure DynamoDB connection
    print("1. Setting up DynamoDB configuration...")
    logging.basicConfig(level=logging.INFO)
    config = DynamoDBConfig.for_local_development()

    # Against AWS, use environment variables instead:
    # config = DynamoDBConfig.from_env()

    client = WrappedDynamoDBClient(config, logger=logging.getLogger("orders"))

    # 2. Create the table (returns once it is ACTIVE)
    print("2. Creating table...")
    description = await client.create_table(TABLE_NAME, **TABLE_OPTIONS)
    print(f"Table status: {description['TableStatus']}")

    # 3. Single items
    print("3. Putting and getting a single item...")
    await client.put_item(TABLE_NAME, {
        'customer_id': 'c-001',
        'order_id': 1,
        'status': 'new',
        'total': Decimal('19.99'),
    })
    order = await client.get_item(TABLE_NAME, {'customer_id': 'c-001', 'order_id': 1}, "status, total")
    print(f"Order 1: {order}")

    # 4. Bulk put: 120 items become 5 concurrent BatchWriteItem chunks
    print("4. Bulk putting orders...")
    orders = [
        {'customer_id': f"c-{index % 4:03d}", 'order_id': index, 'status': 'new'}
        for index in range(120)
    ]
    results = await client.put_items(TABLE_NAME, orders)
    failed = [result for result in results if not result.ok]
    print(f"Chunks: {len(results)}, failed: {len(failed)}")

    response = await client.query(TABLE_NAME, KeyConditionExpression=Key('customer_id').eq('c-001'))
    print(f"Orders for c-001: {response['Count']}")

    # 5. Purge everything, 50 items per scan page
    print("5. Purging table...")
    purged = await client.purge_items(TABLE_NAME, ['customer_id', 'order_id'], page_size=50)
    print(f"Purged {purged} items")

    # 6. Cancellation: set the event from anywhere to stop retries and further requests
    print("6. Cancelling a bulk delete...")
    cancel_event = asyncio.Event()
    cancel_event.set()
    results = await client.delete_items(TABLE_NAME, [{'customer_id': 'c-000', 'order_id': 0}], cancel_event)
    print(f"Cancelled chunk error: {results[0].error}")

    await client.delete_table(TABLE_NAME)
    print("\nExample completed!")


if __name__ == "__main__":
    asyncio.run(main())
