from cookbookfs.chefignore import Chefignore
from cookbookfs.entry import NonexistentEntry
from cookbookfs.entry import resolve_path
from cookbookfs.errors import NotFoundError
from cookbookfs.interfaces import IDirectoryEntry
from cookbookfs.interfaces import IFileEntry
from cookbookfs.repository import RepositoryCookbookDir
from cookbookfs.repository import RepositoryCookbooksDir
from cookbookfs.repository import RepositoryPath
from cookbookfs.repository import RepositoryRootDir

import pytest


def _write(path, content="x"):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content)


@pytest.fixture
def repo_path(tmp_path):
    repo = tmp_path / "repo"
    cookbooks = repo / "cookbooks"
    _write(cookbooks / "apache2-1.0.1" / "metadata.rb", "name 'apache2'\n")
    _write(cookbooks / "apache2-1.0.1" / "recipes" / "default.rb", "package 'apache2'\n")
    _write(cookbooks / "apache2-1.0.1" / "recipes" / "default.rb.swp")
    _write(cookbooks / "apache2-1.0.0" / "metadata.rb")
    _write(cookbooks / "my-thing-2.3.11" / "README.md")
    _write(cookbooks / "not-versioned" / "README.md")
    _write(cookbooks / "stray-1.0.0.txt")
    _write(cookbooks / "chefignore", "# editor files\n*.swp\n\n")
    return repo


@pytest.fixture
def root(repo_path):
    return RepositoryRootDir(str(repo_path))


@pytest.fixture
def cookbooks(root):
    return root.child("cookbooks")


class TestChefignore:
    def test_patterns_skip_comments_and_blanks(self, repo_path):
        chefignore = Chefignore(str(repo_path / "cookbooks"))
        assert chefignore.patterns == ["*.swp"]

    def test_ignored(self, repo_path):
        chefignore = Chefignore(str(repo_path / "cookbooks"))
        assert chefignore.ignored("recipes/default.rb.swp")
        assert not chefignore.ignored("recipes/default.rb")

    def test_missing_file_ignores_nothing(self, tmp_path):
        chefignore = Chefignore(str(tmp_path))
        assert chefignore.patterns == []
        assert not chefignore.ignored("anything")


class TestRepositoryRoot:
    def test_children(self, root):
        [cookbooks] = root.children()
        assert isinstance(cookbooks, RepositoryCookbooksDir)

    def test_no_cookbooks_directory(self, tmp_path):
        assert RepositoryRootDir(str(tmp_path)).children() == []

    def test_unknown_child(self, root):
        assert isinstance(root.child("roles"), NonexistentEntry)

    def test_path_for_printing(self, root, repo_path):
        assert root.path_for_printing == str(repo_path)


class TestRepositoryCookbooksDir:
    def test_interface_provided(self, cookbooks):
        assert IDirectoryEntry.providedBy(cookbooks)

    def test_children_are_versioned_directories(self, cookbooks):
        names = [c.name for c in cookbooks.children()]
        assert names == ["apache2-1.0.0", "apache2-1.0.1", "my-thing-2.3.11"]

    def test_children_cached(self, cookbooks, repo_path):
        first = cookbooks.children()
        _write(repo_path / "cookbooks" / "nginx-1.0.0" / "metadata.rb")
        second = cookbooks.children()
        assert len(second) == 3
        assert all(a is b for a, b in zip(first, second))

    def test_can_have_child(self, cookbooks):
        assert cookbooks.can_have_child("apache2-1.0.0", True)
        assert not cookbooks.can_have_child("apache2-1.0.0", False)
        assert not cookbooks.can_have_child("apache2", True)

    def test_make_child_entry_returns_listed(self, cookbooks):
        listed = cookbooks.children()[1]
        assert cookbooks.make_child_entry("apache2-1.0.1") is listed

    def test_detached_entry(self, cookbooks):
        entry = cookbooks.make_child_entry("nginx-1.0.0")
        assert isinstance(entry, RepositoryCookbookDir)
        assert not entry.exists()
        assert cookbooks._children is None

    def test_chefignore(self, cookbooks):
        assert cookbooks.chefignore.patterns == ["*.swp"]


class TestRepositoryCookbookDir:
    def test_file_path(self, cookbooks, repo_path):
        entry = cookbooks.child("apache2-1.0.1")
        assert entry.file_path == str(repo_path / "cookbooks" / "apache2-1.0.1")
        assert entry.exists()

    def test_chefignore_from_parent(self, cookbooks):
        entry = cookbooks.child("apache2-1.0.1")
        assert entry.chefignore is cookbooks.chefignore

    def test_children_skip_ignored_files(self, cookbooks):
        entry = cookbooks.child("apache2-1.0.1")
        assert [c.name for c in entry.children()] == ["metadata.rb", "recipes"]
        recipes = entry.child("recipes")
        assert [c.name for c in recipes.children()] == ["default.rb"]

    def test_read_file(self, root):
        recipe = resolve_path(root, "/cookbooks/apache2-1.0.1/recipes/default.rb")
        assert isinstance(recipe, RepositoryPath)
        assert IFileEntry.providedBy(recipe)
        assert not recipe.is_dir()
        assert recipe.read() == b"package 'apache2'\n"

    def test_read_missing_file(self, root):
        missing = resolve_path(root, "/cookbooks/apache2-1.0.1/recipes/missing.rb")
        assert not missing.exists()
        with pytest.raises(NotFoundError):
            missing.read()

    def test_paths(self, root):
        recipe = resolve_path(root, "/cookbooks/apache2-1.0.1/recipes/default.rb")
        assert recipe.path == "/cookbooks/apache2-1.0.1/recipes/default.rb"
