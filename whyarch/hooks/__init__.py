"""Installation and removal of managed git hooks."""