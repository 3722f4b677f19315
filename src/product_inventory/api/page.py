"""Single page UI that consumes the JSON API."""

from fastapi import APIRouter
from fastapi.responses import HTMLResponse

router = APIRouter(tags=["ui"])


@router.get("/", response_class=HTMLResponse)
async def index() -> HTMLResponse:
    """Serve the inventory UI."""
    return HTMLResponse(_INDEX_HTML)


_INDEX_HTML = """<!doctype html>
<html lang="en">
  <head>
    <meta charset="utf-8" />
    <meta name="viewport" content="width=device-width, initial-scale=1" />
    <title>Product Inventory</title>
    <script src="https://accounts.google.com/gsi/client" async defer></script>
    <style>
      body { font-family: ui-sans-serif, system-ui, sans-serif; margin: 0; background: #eef2ff; }
      nav { display: flex; justify-content: space-between; align-items: center;
            padding: 1rem 2rem; background: #fff; border-bottom: 1px solid #ddd; }
      main { max-width: 1100px; margin: 0 auto; padding: 1.5rem; }
      form { background: #fff; padding: 1.5rem; border-radius: 8px; margin-bottom: 1.5rem; }
      label { display: block; font-size: 0.9rem; margin-top: 0.75rem; }
      input, textarea { width: 100%; padding: 0.4rem 0.6rem; box-sizing: border-box; }
      button { padding: 0.4rem 0.8rem; margin-top: 0.75rem; margin-right: 0.5rem; }
      button:disabled { opacity: 0.5; }
      .grid { display: grid; grid-template-columns: repeat(auto-fill, minmax(220px, 1fr)); gap: 1rem; }
      .card { background: #fff; border-radius: 8px; overflow: hidden; }
      .card img { width: 100%; height: 180px; object-fit: cover; }
      .card div { padding: 0.75rem; }
      .empty { text-align: center; color: #666; padding: 3rem; }
      .hidden { display: none; }
      #auth { max-width: 420px; margin: 4rem auto; }
      #modal { position: fixed; inset: 0; background: rgba(0, 0, 0, 0.5);
               display: flex; align-items: center; justify-content: center; }
      #modal form { width: 420px; }
      #toasts { position: fixed; top: 1rem; right: 1rem; }
      .toast { padding: 0.6rem 1rem; margin-bottom: 0.5rem; border-radius: 6px; color: #fff; }
      .toast.success { background: #16a34a; }
      .toast.error { background: #dc2626; }
    </style>
  </head>
  <body>
    <div id="toasts"></div>

    <section id="auth" class="hidden">
      <form id="auth-form">
        <h2 id="auth-title">Welcome Back</h2>
        <div id="google-signin-button"></div>
        <label>Email <input id="email" type="email" required /></label>
        <label>Password <input id="password" type="password" required /></label>
        <button id="auth-submit" type="submit">Sign In</button>
        <button id="auth-toggle" type="button">Don't have an account? Sign Up</button>
      </form>
    </section>

    <section id="app" class="hidden">
      <nav>
        <h1>Product Inventory</h1>
        <div>
          <button id="toggle-form" type="button">Add Product</button>
          <button id="sign-out" type="button">Sign Out</button>
        </div>
      </nav>
      <main>
        <form id="product-form" class="hidden">
          <label>Product Name <input name="name" type="text" required /></label>
          <label>Price ($) <input name="price" type="number" step="0.01" required /></label>
          <label>Comments <textarea name="comments" rows="3" required></textarea></label>
          <label>Product Image <input name="image" type="file" accept="image/*" required /></label>
          <button type="submit">Add Product</button>
        </form>
        <input id="search" type="text" placeholder="Search products by name..." />
        <div id="empty" class="empty hidden"></div>
        <div id="grid" class="grid"></div>
      </main>
    </section>

    <div id="modal" class="hidden">
      <form id="edit-form">
        <h2>Edit Product</h2>
        <label>Product Name <input name="name" type="text" required /></label>
        <label>Price ($) <input name="price" type="number" step="0.01" required /></label>
        <label>Comments <textarea name="comments" rows="3" required></textarea></label>
        <label>Product Image <input name="image" type="file" accept="image/*" /></label>
        <p>Current image will be kept unless a new one is chosen.</p>
        <button id="edit-cancel" type="button">Cancel</button>
        <button type="submit">Update Product</button>
      </form>
    </div>

    <script>
      let isSignUp = false;
      let editingId = null;
      let oneTapMounted = false;

      function toast(notification) {
        if (!notification) return;
        const el = document.createElement('div');
        el.className = 'toast ' + notification.level;
        el.textContent = notification.message;
        document.getElementById('toasts').appendChild(el);
        setTimeout(() => el.remove(), 4000);
      }

      async function call(method, path, body) {
        const options = { method, credentials: 'same-origin', headers: {} };
        if (body instanceof FormData) {
          options.body = body;
        } else if (body !== undefined) {
          options.headers['Content-Type'] = 'application/json';
          options.body = JSON.stringify(body);
        }
        const res = await fetch(path, options);
        const data = await res.json().catch(() => ({}));
        if (!res.ok) {
          toast(data.notification || { level: 'error', message: 'Error: ' + res.status });
          return null;
        }
        toast(data.notification);
        return data;
      }

      async function withDisabled(form, action) {
        const buttons = form.querySelectorAll('button[type=submit]');
        buttons.forEach((b) => (b.disabled = true));
        try {
          return await action();
        } finally {
          buttons.forEach((b) => (b.disabled = false));
        }
      }

      function render(list) {
        if (!list) return;
        const grid = document.getElementById('grid');
        const empty = document.getElementById('empty');
        grid.innerHTML = '';
        empty.textContent = list.empty_message || '';
        empty.classList.toggle('hidden', !list.empty_message);
        for (const p of list.products) {
          const card = document.createElement('div');
          card.className = 'card';
          const img = document.createElement('img');
          img.src = p.image_public_url;
          img.alt = p.name;
          const body = document.createElement('div');
          const title = document.createElement('h3');
          title.textContent = p.name;
          const price = document.createElement('p');
          price.textContent = '$' + Number(p.price).toFixed(2);
          const comments = document.createElement('p');
          comments.textContent = p.comments;
          const edit = document.createElement('button');
          edit.textContent = 'Edit';
          edit.onclick = () => openEdit(p.id);
          const del = document.createElement('button');
          del.textContent = 'Delete';
          del.onclick = () => deleteProduct(p.id);
          body.append(title, price, comments, edit, del);
          card.append(img, body);
          grid.appendChild(card);
        }
      }

      async function loadProducts() {
        const q = encodeURIComponent(document.getElementById('search').value);
        render(await call('GET', '/api/products?q=' + q));
      }

      async function deleteProduct(id) {
        if (!confirm('Are you sure you want to delete this product?')) return;
        render(await call('DELETE', '/api/products/' + id + '?confirm=true'));
      }

      async function openEdit(id) {
        const data = await call('POST', '/api/products/' + id + '/edit');
        if (!data) return;
        editingId = id;
        const form = document.getElementById('edit-form');
        form.reset();
        form.elements['name'].value = data.values.name;
        form.elements['price'].value = data.values.price;
        form.elements['comments'].value = data.values.comments;
        document.getElementById('modal').classList.remove('hidden');
      }

      async function closeEdit() {
        editingId = null;
        document.getElementById('modal').classList.add('hidden');
        await call('DELETE', '/api/products/edit');
      }

      function mountOneTap(config) {
        if (oneTapMounted || !config || !(window.google && window.google.accounts)) return;
        oneTapMounted = true;
        window.google.accounts.id.initialize({
          ...config,
          callback: async (response) => {
            const data = await call('POST', '/api/auth/google', { credential: response.credential });
            if (data) refreshSession();
          },
        });
        const buttonDiv = document.getElementById('google-signin-button');
        window.google.accounts.id.renderButton(buttonDiv, {
          type: 'standard', shape: 'pill', theme: 'outline',
          text: 'signin_with', size: 'large', logo_alignment: 'left',
        });
        window.google.accounts.id.prompt((notification) => {
          if (notification.isNotDisplayed()) {
            console.log('One Tap not displayed');
          }
        });
      }

      async function refreshSession() {
        const data = await call('GET', '/api/session');
        if (!data) return;
        const signedIn = data.view === 'main';
        document.getElementById('auth').classList.toggle('hidden', signedIn);
        document.getElementById('app').classList.toggle('hidden', !signedIn);
        if (signedIn) {
          await loadProducts();
        } else {
          mountOneTap(data.federated_prompt);
        }
      }

      document.getElementById('auth-toggle').onclick = () => {
        isSignUp = !isSignUp;
        document.getElementById('auth-title').textContent = isSignUp ? 'Create Account' : 'Welcome Back';
        document.getElementById('auth-submit').textContent = isSignUp ? 'Sign Up' : 'Sign In';
        document.getElementById('auth-toggle').textContent = isSignUp
          ? 'Already have an account? Sign In'
          : "Don't have an account? Sign Up";
      };

      document.getElementById('auth-form').onsubmit = (e) => {
        e.preventDefault();
        const form = e.target;
        withDisabled(form, async () => {
          const body = {
            email: document.getElementById('email').value,
            password: document.getElementById('password').value,
          };
          const data = await call('POST', isSignUp ? '/api/auth/sign-up' : '/api/auth/sign-in', body);
          if (data) await refreshSession();
        });
      };

      document.getElementById('sign-out').onclick = async () => {
        await call('POST', '/api/auth/sign-out');
        await refreshSession();
      };

      document.getElementById('toggle-form').onclick = () => {
        const form = document.getElementById('product-form');
        form.classList.toggle('hidden');
        document.getElementById('toggle-form').textContent =
          form.classList.contains('hidden') ? 'Add Product' : 'Close Form';
      };

      document.getElementById('product-form').onsubmit = (e) => {
        e.preventDefault();
        const form = e.target;
        withDisabled(form, async () => {
          const data = await call('POST', '/api/products', new FormData(form));
          if (data) {
            form.reset();
            form.classList.add('hidden');
            document.getElementById('toggle-form').textContent = 'Add Product';
            render(data);
          }
        });
      };

      document.getElementById('edit-form').onsubmit = (e) => {
        e.preventDefault();
        const form = e.target;
        const body = new FormData(form);
        if (!form.elements['image'].files.length) body.delete('image');
        withDisabled(form, async () => {
          const data = await call('PUT', '/api/products/' + editingId, body);
          if (data) {
            editingId = null;
            document.getElementById('modal').classList.add('hidden');
            render(data);
          }
        });
      };

      document.getElementById('edit-cancel').onclick = closeEdit;

      let searchTimer = null;
      document.getElementById('search').oninput = (e) => {
        clearTimeout(searchTimer);
        const q = encodeURIComponent(e.target.value);
        searchTimer = setTimeout(async () => render(await call('GET', '/api/products/search?q=' + q)), 150);
      };

      window.addEventListener('load', refreshSession);
    </script>
  </body>
</html>
"""
