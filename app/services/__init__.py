# Services package.
#
# Each module exposes a focused set of async functions that encapsulate
# business logic and database access for a single domain aggregate:
#
#   auth_service     : password hashing, tokens, register / login
#   article_service  : CRUD + pagination + sort for Article
#   category_service : CRUD + pagination for Category
#   comment_service  : CRUD + pagination for Comment
#   user_service     : reads and self-service edits for User
#   common           : pagination envelope, PATCH payloads, referential checks
#
# All service functions accept an AsyncSession as their first argument
# so that the router layer controls the transaction boundary via the
# ``get_db`` dependency.  Functions that write also take the caller id
# resolved by ``get_current_user_id`` as an explicit argument.
