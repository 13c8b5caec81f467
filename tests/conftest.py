"""Shared fixtures."""

import sys

import pytest

from gql_querygen.core.schema import Schema, load_schema_from_sdl

SAMPLE_SDL = '''
"""Entry points for reading data."""
type Query {
  user(id: ID!): User
  users(filter: UserFilter, first: Int, status: [Status!]): [User!]!
  search(term: String!): [SearchResult]
  node(id: ID!): Node
  version: String
}

type Mutation {
  createUser(input: CreateUserInput!): User
}

interface Node {
  id: ID!
}

"""A registered person."""
type User implements Node {
  id: ID!
  name: String
  "Current account state"
  status: Status
  friends(first: Int): [User]
  tags: [String!]
  legacyName: String @deprecated(reason: "Use name")
  createdAt: DateTime
}

type Post implements Node {
  id: ID!
  title: String
  author: User
}

union SearchResult = User | Post

enum Status {
  ACTIVE
  INACTIVE
  BANNED @deprecated(reason: "No longer assigned")
}

scalar DateTime

input UserFilter {
  name: String
  status: Status
  createdAfter: DateTime
}

input CreateUserInput {
  name: String!
  email: String
  tags: [String!]
}
'''


@pytest.fixture
def sample_schema() -> Schema:
    return load_schema_from_sdl(SAMPLE_SDL)


@pytest.fixture
def cleanup_modules():
    """Remove generated modules registered during a test."""
    yield
    for name in [name for name in sys.modules if name.startswith("generated_")]:
        del sys.modules[name]
