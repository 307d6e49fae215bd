"""Page-context functions run through RenderSession.evaluate().

Each constant is a JavaScript function declaration. Arguments are passed as
JSON and the return value must be JSON-serializable.
"""

FIND_LOGIN_MARKER = """
(selectors) => selectors.some((selector) => document.querySelector(selector) !== null)
"""

SCROLL_THROUGH = """
async (candidates, step, pause, settle, dispatchResize) => {
  const sleep = (ms) => new Promise((resolve) => setTimeout(resolve, ms));
  if (dispatchResize) {
    window.dispatchEvent(new Event("resize"));
  }

  let container = null;
  let scrollable = null;
  for (const selector of candidates) {
    const el = document.querySelector(selector);
    if (el) {
      container = selector;
      scrollable = el;
      break;
    }
  }
  if (!scrollable) {
    container = "body";
    scrollable = document.scrollingElement || document.body;
  }

  const fullHeight = Math.max(
    document.body ? document.body.scrollHeight : 0,
    document.documentElement.scrollHeight,
    scrollable.scrollHeight
  );

  let steps = 0;
  for (let y = 0; y < fullHeight; y += step) {
    scrollable.scrollTo(0, y);
    steps += 1;
    await sleep(pause);
  }
  scrollable.scrollTo(0, fullHeight);
  await sleep(pause);
  scrollable.scrollTo(0, 0);
  await sleep(settle);

  return { container: container, scrollHeight: fullHeight, steps: steps };
}
"""

MEASURE_CONTENT = """
(panelSelectors) => {
  const scrollTop = window.pageYOffset || document.documentElement.scrollTop || 0;
  const panelBottoms = [];
  if (panelSelectors.length > 0) {
    document.querySelectorAll(panelSelectors.join(", ")).forEach((panel) => {
      const rect = panel.getBoundingClientRect();
      panelBottoms.push(rect.top + scrollTop + rect.height);
    });
  }
  const body = document.body;
  const root = document.documentElement;
  return {
    panelBottoms: panelBottoms,
    documentHeights: [
      body ? body.scrollHeight : 0,
      root.scrollHeight,
      body ? body.offsetHeight : 0,
      root.offsetHeight,
      body ? body.clientHeight : 0,
      root.clientHeight,
    ],
    viewportWidth: window.innerWidth,
  };
}
"""

FIND_TITLE = """
(selectors, usePanelHeading) => {
  for (const selector of selectors) {
    const el = document.querySelector(selector);
    const text = el && el.textContent ? el.textContent.trim() : "";
    if (text) {
      return text;
    }
  }
  if (usePanelHeading) {
    const headings = document.querySelectorAll("h6");
    if (headings.length === 1) {
      const text = (headings[0].innerText || headings[0].textContent || "").trim();
      if (text) {
        return text;
      }
    }
  }
  return null;
}
"""

FIND_TEXT = """
(selectors) => {
  for (const selector of selectors) {
    const el = document.querySelector(selector);
    const text = el ? (el.innerText || el.textContent || "").trim() : "";
    if (text) {
      return text;
    }
  }
  return null;
}
"""

HIDE_ELEMENTS = """
(selectors) => {
  let hidden = 0;
  for (const selector of selectors) {
    document.querySelectorAll(selector).forEach((el) => {
      el.style.display = "none";
      hidden += 1;
    });
  }
  return hidden;
}
"""

INSERT_HEADER = """
(title, timeRangeLabel, logoDataUrl, height) => {
  const existing = document.getElementById("dashboard-pdf-header");
  if (existing) {
    existing.remove();
  }

  const header = document.createElement("div");
  header.id = "dashboard-pdf-header";
  header.className = "dashboard-pdf-header";
  header.style.cssText = `
    position: fixed;
    top: 0;
    left: 0;
    width: 100%;
    height: ${height}px;
    display: flex;
    justify-content: space-between;
    align-items: center;
    padding: 0 30px;
    z-index: 1000;
    box-sizing: border-box;
    background: #ffffff;
  `;

  const info = document.createElement("div");
  info.style.cssText = "display: flex; flex-direction: column; align-items: flex-start; gap: 5px;";

  const titleDiv = document.createElement("div");
  titleDiv.style.cssText = "font-size: 24px; font-weight: 600; color: #333333;";
  titleDiv.textContent = title;

  const dateDiv = document.createElement("div");
  dateDiv.style.cssText = "font-size: 20px; font-weight: 500; color: #464646;";
  dateDiv.textContent = timeRangeLabel;

  info.appendChild(titleDiv);
  info.appendChild(dateDiv);
  header.appendChild(info);

  if (logoDataUrl) {
    const logo = document.createElement("img");
    logo.src = logoDataUrl;
    logo.style.cssText = "max-width: 120px; max-height: 60px;";
    header.appendChild(logo);
  }

  document.body.prepend(header);
  return true;
}
"""

INSERT_STYLESHEET = """
(css) => {
  const style = document.createElement("style");
  style.id = "dashboard-pdf-print-style";
  style.textContent = css;
  document.head.appendChild(style);
  return true;
}
"""
